from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from likert_charts.config import FETCH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# Object payloads are unwrapped through the first of these keys that holds a list.
_WRAPPER_KEYS = ("data", "records", "rows")


class DataLoaderError(Exception):
    """Raised when the response endpoint fails or returns an unexpected shape."""


def _build_retry_session() -> requests.Session:
    """
    Build a requests Session with conservative retries.
    Spreadsheet-backed endpoints are slow to wake up and occasionally rate limit.
    """
    session = requests.Session()

    retry = Retry(
        total=3,
        connect=3,
        read=3,
        status=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_retry_session()
    return _SESSION


def _unwrap_records(payload: Any) -> Any:
    if isinstance(payload, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    return payload


def fetch_responses(
    url: str,
    *,
    timeout_seconds: int = FETCH_TIMEOUT_SECONDS,
) -> List[Dict[str, Any]]:
    """
    Fetch the survey response rows from the remote endpoint (GET).

    The endpoint is expected to return a JSON array of flat records.
    An object wrapping that array under "data", "records" or "rows" is
    accepted too. Rows are returned as-is; value parsing is the
    aggregator's job.
    """
    if not url or not url.strip():
        raise DataLoaderError("Response endpoint URL is empty.")

    t0 = time.perf_counter()
    try:
        resp = _get_session().get(url, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise DataLoaderError(f"HTTP error while fetching responses: {exc}") from exc

    if not resp.ok:
        preview = (resp.text or "")[:200]
        raise DataLoaderError(f"Response endpoint returned status={resp.status_code}. Preview: {preview}")

    try:
        data = resp.json()
    except ValueError as exc:
        preview = (resp.text or "")[:200]
        raise DataLoaderError(f"Non-JSON response (status={resp.status_code}). Preview: {preview}") from exc

    records = _unwrap_records(data)
    if not isinstance(records, list):
        raise DataLoaderError(f"Unexpected response payload type: {type(data)}")

    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise DataLoaderError(f"Response row {i} is not an object: {type(rec)}")

    logger.info("Fetched %d response rows in %0.2fs", len(records), time.perf_counter() - t0)
    return records
