"""Client for the sibling inference service ("pyapp").

Two endpoints are used:
  GET /ping                 -> 200 once the model is loaded
  GET /q?query=<q>&n=<int>  -> {"items": ["phrase", ...]}

Candidate requests are single-attempt with a bounded timeout. Any failure is
raised as RemoteServiceError; the engine decides whether that is fatal.
"""

from __future__ import annotations
import logging
from typing import List, Optional

import requests

from . import config as CFG
from .errors import RemoteServiceError

log = logging.getLogger(__name__)


class RemoteClient:
    def __init__(self, host: str = CFG.REMOTE_HOST, *,
                 timeout: float = CFG.REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None) -> None:
        self.host = host
        self.timeout = timeout
        self._session = session or requests.Session()

    def _url(self, path: str) -> str:
        if "://" in self.host:
            return self.host.rstrip("/") + path
        return f"http://{self.host}{path}"

    # -------- readiness --------
    def ping(self) -> bool:
        """True iff the health endpoint answers HTTP 200. Never raises on transport errors."""
        try:
            r = self._session.get(self._url(CFG.PING_PATH), timeout=self.timeout)
        except requests.RequestException as exc:
            log.debug("ping %s failed: %s", self.host, exc)
            return False
        r.close()
        if r.status_code != 200:
            log.debug("ping %s: HTTP %d", self.host, r.status_code)
        return r.status_code == 200

    # -------- candidates --------
    def fetch(self, query: str, count: int) -> List[str]:
        """Ask the service for `count` phrase candidates for `query`."""
        url = self._url(CFG.QUERY_PATH)
        try:
            r = self._session.get(
                url,
                params={"query": query, "n": str(count)},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise RemoteServiceError(f"candidate request to {url} failed: {exc}") from exc

        if r.status_code != 200:
            raise RemoteServiceError(f"candidate request to {url}: HTTP {r.status_code}")

        try:
            payload = r.json()
        except ValueError as exc:
            raise RemoteServiceError(f"candidate response from {url} is not JSON") from exc

        if not isinstance(payload, dict):
            raise RemoteServiceError(f"candidate response from {url} is not a JSON object")
        # a missing or null "items" means no suggestions
        items = payload.get("items") or []
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            raise RemoteServiceError(f"candidate response from {url}: 'items' is not a list of strings")
        log.debug("remote %r n=%d -> %d items", query, count, len(items))
        return items

    def close(self) -> None:
        self._session.close()
