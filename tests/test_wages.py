from __future__ import annotations

import threading

import pytest

from college_match.career import wages as wages_module
from college_match.career.wages import (
    WageData,
    build_series_id,
    build_wage_session,
    collect_wage_data,
    fetch_occupation_wages,
    parse_bls_response,
)


def _series(series_id: str, *rows: tuple[str, str]) -> dict[str, object]:
    return {"seriesID": series_id, "data": [{"year": year, "value": value} for year, value in rows]}


def test_series_id_strips_dash() -> None:
    assert build_series_id("15-1252", "04") == "OEUS00000015125204"


def test_parse_bls_response_takes_latest_year() -> None:
    payload = {
        "status": "REQUEST_SUCCEEDED",
        "Results": {
            "series": [
                _series("OEUS00000015125204", ("2023", "130,160"), ("2024", "133,080")),
                _series("OEUS00000015125208", ("2024", "79,850")),
                _series("OEUS00000015125201", ("2024", "-")),
            ]
        },
    }

    wages = parse_bls_response(payload, "15-1252")

    assert wages == WageData(median_annual_wage=133_080.0, entry_level_wage=79_850.0, employment_count=None)


def test_parse_bls_response_failure_status_is_empty() -> None:
    assert parse_bls_response({"status": "REQUEST_NOT_PROCESSED"}, "15-1252") == WageData()


def test_collect_wage_data_limits_dedupes_and_keeps_order() -> None:
    seen: list[str] = []
    lock = threading.Lock()

    def fetch(code: str) -> WageData:
        with lock:
            seen.append(code)
        if code == "29-1141":
            raise TimeoutError("slow upstream")
        return WageData(median_annual_wage=float(len(code)))

    wages = collect_wage_data(["15-1252", "29-1141", "15-1252", "11-1021", "13-2011"], fetch)

    assert list(wages) == ["15-1252", "29-1141", "11-1021"]
    assert sorted(seen) == ["11-1021", "15-1252", "29-1141"]
    assert wages["29-1141"] == WageData()
    assert wages["15-1252"].median_annual_wage == 7.0


def test_collect_wage_data_without_codes() -> None:
    assert collect_wage_data([], lambda code: WageData()) == {}


class _FakeResponse:
    def __init__(self, body: object) -> None:
        self._body = body

    def raise_for_status(self) -> None:
        return None

    def json(self) -> object:
        return self._body


class _FakeSession:
    def __init__(self, body: object) -> None:
        self.body = body
        self.calls: list[dict[str, object]] = []
        self.closed = False

    def post(self, url: str, *, json: dict[str, object], timeout: tuple[float, float]) -> _FakeResponse:
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        return _FakeResponse(self.body)

    def close(self) -> None:
        self.closed = True


def test_wage_session_retries_throttled_posts() -> None:
    session = build_wage_session(max_retries=3)
    try:
        retry = session.get_adapter("https://api.bls.gov/publicAPI/v1/timeseries/data/").max_retries

        assert retry.total == 3
        assert 429 in retry.status_forcelist
        assert 503 in retry.status_forcelist
        assert "POST" in retry.allowed_methods
        assert retry.respect_retry_after_header is True
    finally:
        session.close()


def test_fetch_occupation_wages_builds_a_retrying_session_when_none_given(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeSession(
        {
            "status": "REQUEST_SUCCEEDED",
            "Results": {"series": [_series("OEUS00000029114104", ("2024", "86,070"))]},
        }
    )
    monkeypatch.setattr(wages_module, "build_wage_session", lambda: fake)

    wages = fetch_occupation_wages("29-1141")

    assert wages == WageData(median_annual_wage=86_070.0)
    assert fake.closed is True
    assert fake.calls[0]["json"]["seriesid"][0] == "OEUS00000029114104"
    assert fake.calls[0]["timeout"] == (5.0, 15.0)


def test_fetch_occupation_wages_leaves_caller_session_open() -> None:
    fake = _FakeSession(["unexpected"])

    assert fetch_occupation_wages("15-1252", session=fake) == WageData()
    assert fake.closed is False
