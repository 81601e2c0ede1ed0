"""HTTP session shared by the catalog and detail fetchers."""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter

from lotto_ingest.cancellation import CancellationToken


def build_http_session() -> requests.Session:
    """Create a requests session. Failed calls are not retried."""

    adapter = HTTPAdapter(max_retries=0, pool_connections=1, pool_maxsize=1)

    session = requests.Session()
    session.headers.update({"User-Agent": "Mozilla/5.0", "Accept": "application/json"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def get_json(
    http: requests.Session,
    url: str,
    *,
    timeout_seconds: float,
    params: dict[str, Any] | None = None,
    cancellation: CancellationToken | None = None,
) -> Any:
    """GET ``url`` and decode the JSON body.

    Raises ``requests.HTTPError`` for non-2xx statuses and
    ``requests.JSONDecodeError`` for bodies that are not JSON.
    """

    if cancellation is not None:
        cancellation.raise_if_cancelled()

    resp = http.get(url, params=params, timeout=timeout_seconds)

    if cancellation is not None:
        cancellation.raise_if_cancelled()

    resp.raise_for_status()
    return resp.json()
