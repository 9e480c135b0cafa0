from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from college_match.errors import CollaboratorError

DEFAULT_USER_AGENT = "CollegeMatchEngine/0.1 (+https://localhost; contact=local)"
logger = logging.getLogger(__name__)
_SLOW_REQUEST_SECONDS = 5.0


class TextGenerator(Protocol):
    def generate(self, prompt: str, *, max_tokens: int = 2048) -> str:
        """Return free text for a prompt."""


@dataclass(slots=True)
class HttpTextGenerator:
    """Text-generation collaborator reached over HTTP.

    POSTs `{"prompt", "max_tokens", **extra_payload}` to `endpoint_url` and
    reads the `text` field of the JSON response. Calls are time-boxed,
    rate limited and retried on transient status codes.
    """

    endpoint_url: str
    api_key: str | None = None
    requests_per_second: float = 1.0
    timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = 2
    backoff_factor: float = 0.5
    extra_payload: dict[str, Any] = field(default_factory=dict)
    _session: requests.Session = field(init=False, repr=False)
    _last_request_monotonic: float = field(init=False, default=0.0)
    _rate_limit_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})
        if self.api_key:
            self._session.headers.update({"Authorization": f"Bearer {self.api_key}"})

        retry = Retry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            status=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"POST"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self._last_request_monotonic = 0.0
        self._rate_limit_lock = threading.Lock()

    def close(self) -> None:
        self._session.close()

    @property
    def timeout_tuple(self) -> tuple[float, float]:
        connect_timeout = max(1.0, min(self.timeout_seconds, 5.0))
        read_timeout = max(connect_timeout, self.timeout_seconds)
        return connect_timeout, read_timeout

    def generate(self, prompt: str, *, max_tokens: int = 2048) -> str:
        payload = {**self.extra_payload, "prompt": prompt, "max_tokens": max_tokens}
        try:
            response = self._request(payload)
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise CollaboratorError(
                f"Text generation request to {self.endpoint_url} failed.",
                collaborator="text_generation",
                original_error=exc,
            ) from exc

        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise CollaboratorError(
                "Text generation response has no 'text' field.",
                collaborator="text_generation",
            )
        return text

    def _request(self, payload: dict[str, Any]) -> Response:
        self._sleep_for_rate_limit()
        started_at = time.monotonic()
        response = self._session.post(
            self.endpoint_url,
            json=payload,
            timeout=self.timeout_tuple,
        )
        elapsed = time.monotonic() - started_at
        if elapsed > _SLOW_REQUEST_SECONDS:
            logger.warning("Slow HTTP POST %.3fs %s", elapsed, self.endpoint_url)
        response.raise_for_status()
        return response

    def _sleep_for_rate_limit(self) -> None:
        if self.requests_per_second <= 0:
            return
        min_interval = 1.0 / self.requests_per_second
        with self._rate_limit_lock:
            elapsed = time.monotonic() - self._last_request_monotonic
            sleep_seconds = min_interval - elapsed
            if sleep_seconds > 0:
                time.sleep(sleep_seconds)
            self._last_request_monotonic = time.monotonic()
