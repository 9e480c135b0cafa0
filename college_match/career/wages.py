from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

BLS_TIMESERIES_URL = "https://api.bls.gov/publicAPI/v1/timeseries/data/"
MAX_WAGE_CODES = 3
WAGE_RETRY_STATUSES = (429, 500, 502, 503, 504)
_MEDIAN_WAGE = "04"
_ENTRY_WAGE = "08"
_EMPLOYMENT = "01"


@dataclass(frozen=True, slots=True)
class WageData:
    median_annual_wage: float | None = None
    entry_level_wage: float | None = None
    employment_count: float | None = None

    def to_dict(self) -> dict[str, float | None]:
        return {
            "median_annual_wage": self.median_annual_wage,
            "entry_level_wage": self.entry_level_wage,
            "employment_count": self.employment_count,
        }


WageFetcher = Callable[[str], WageData]


def build_wage_session(*, max_retries: int = 2, backoff_factor: float = 1.0) -> requests.Session:
    """Session for the BLS API that backs off on throttling and transient upstream errors."""
    session = requests.Session()
    retry = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=WAGE_RETRY_STATUSES,
        allowed_methods=frozenset({"POST"}),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def build_series_id(occupation_code: str, datatype: str) -> str:
    """National OEWS series id, e.g. 15-1252 median wage -> OEUS000000151252 + 04."""
    return f"OEUS000000{occupation_code.replace('-', '')}{datatype}"


def _latest_value(series: dict[str, Any] | None) -> float | None:
    if not series:
        return None
    data = [row for row in series.get("data") or [] if isinstance(row, dict)]
    if not data:
        return None
    latest = max(data, key=lambda row: int(str(row.get("year") or 0)))
    try:
        return float(str(latest.get("value", "")).replace(",", ""))
    except ValueError:
        return None


def parse_bls_response(payload: dict[str, Any], occupation_code: str) -> WageData:
    if payload.get("status") != "REQUEST_SUCCEEDED":
        return WageData()

    results = payload.get("Results") or {}
    by_id = {
        str(series.get("seriesID")): series
        for series in results.get("series") or []
        if isinstance(series, dict)
    }
    return WageData(
        median_annual_wage=_latest_value(by_id.get(build_series_id(occupation_code, _MEDIAN_WAGE))),
        entry_level_wage=_latest_value(by_id.get(build_series_id(occupation_code, _ENTRY_WAGE))),
        employment_count=_latest_value(by_id.get(build_series_id(occupation_code, _EMPLOYMENT))),
    )


def fetch_occupation_wages(
    occupation_code: str,
    *,
    session: requests.Session | None = None,
    start_year: int = 2023,
    end_year: int = 2024,
    timeout: tuple[float, float] = (5.0, 15.0),
) -> WageData:
    """Fetch national median, entry-level and employment figures for one occupation code."""
    payload = {
        "seriesid": [
            build_series_id(occupation_code, _MEDIAN_WAGE),
            build_series_id(occupation_code, _ENTRY_WAGE),
            build_series_id(occupation_code, _EMPLOYMENT),
        ],
        "startyear": str(start_year),
        "endyear": str(end_year),
    }
    client = session or build_wage_session()
    try:
        response = client.post(BLS_TIMESERIES_URL, json=payload, timeout=timeout)
        response.raise_for_status()
        body = response.json()
    finally:
        if session is None:
            client.close()
    if not isinstance(body, dict):
        return WageData()
    return parse_bls_response(body, occupation_code)


def collect_wage_data(
    occupation_codes: Sequence[str],
    fetch: WageFetcher = fetch_occupation_wages,
    *,
    max_codes: int = MAX_WAGE_CODES,
) -> dict[str, WageData]:
    """Fetch wages for the first `max_codes` codes concurrently; a failed fetch yields all-null fields."""
    codes = list(dict.fromkeys(occupation_codes))[:max_codes]
    if not codes:
        return {}

    results: dict[str, WageData] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(codes)) as executor:
        futures = {executor.submit(fetch, code): code for code in codes}
        for future in concurrent.futures.as_completed(futures):
            code = futures[future]
            try:
                results[code] = future.result()
            except Exception:
                logger.warning("Wage fetch failed for occupation %s; using empty wage data.", code, exc_info=True)
                results[code] = WageData()

    return {code: results[code] for code in codes}
