from __future__ import annotations

from typing import Any

import pytest
import requests

from college_match.errors import CollaboratorError
from college_match.narrative.http import HttpTextGenerator


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def _generator(monkeypatch: pytest.MonkeyPatch, response: _FakeResponse, calls: list[dict[str, Any]]) -> HttpTextGenerator:
    generator = HttpTextGenerator(
        endpoint_url="https://text.example.test/generate",
        api_key="secret",
        requests_per_second=0,
        extra_payload={"model": "small"},
    )

    def fake_post(url: str, **kwargs: Any) -> _FakeResponse:
        calls.append({"url": url, **kwargs})
        return response

    monkeypatch.setattr(generator._session, "post", fake_post)
    return generator


def test_generate_posts_prompt_and_returns_text(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    generator = _generator(monkeypatch, _FakeResponse({"text": "1. Great fit."}), calls)

    assert generator.generate("Explain", max_tokens=256) == "1. Great fit."
    assert calls[0]["url"] == "https://text.example.test/generate"
    assert calls[0]["json"] == {"model": "small", "prompt": "Explain", "max_tokens": 256}
    assert calls[0]["timeout"] == generator.timeout_tuple
    assert generator._session.headers["Authorization"] == "Bearer secret"


def test_http_error_becomes_collaborator_error(monkeypatch: pytest.MonkeyPatch) -> None:
    generator = _generator(monkeypatch, _FakeResponse({"text": "x"}, status_code=503), [])

    with pytest.raises(CollaboratorError) as excinfo:
        generator.generate("Explain")

    assert excinfo.value.details == {"collaborator": "text_generation"}
    assert isinstance(excinfo.value.original_error, requests.HTTPError)


def test_missing_text_field_or_bad_json_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(CollaboratorError):
        _generator(monkeypatch, _FakeResponse({"output": "x"}), []).generate("Explain")
    with pytest.raises(CollaboratorError):
        _generator(monkeypatch, _FakeResponse(ValueError("not json")), []).generate("Explain")


def test_timeout_tuple_bounds_connect_timeout() -> None:
    assert HttpTextGenerator(endpoint_url="http://x", timeout_seconds=30.0).timeout_tuple == (5.0, 30.0)
    assert HttpTextGenerator(endpoint_url="http://x", timeout_seconds=0.5).timeout_tuple == (1.0, 1.0)
