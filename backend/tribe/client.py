"""
HTTP client for the tribe API (httpx). Used by remote callers and by the HTTP SyncLoop fetcher.

Error responses are mapped back to the domain exceptions (400/403/404/503); any other
non-2xx raises httpx.HTTPStatusError, which the SyncLoop treats as transient.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from tribe.core.constants import PARTICIPANT_TOKEN_HEADER
from tribe.core.errors import ERROR_STATUS_RULES

logger = logging.getLogger(__name__)

# status_code -> domain exception type (inverse of ERROR_STATUS_RULES)
_STATUS_TO_ERROR = {status: exc_type for exc_type, status in ERROR_STATUS_RULES}


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    exc_type = _STATUS_TO_ERROR.get(resp.status_code)
    if exc_type is not None:
        try:
            detail = resp.json().get("detail")
        except ValueError:
            detail = None
        raise exc_type(detail or resp.reason_phrase)
    resp.raise_for_status()


class TribeClient:
    def __init__(
        self,
        base_url: str,
        participant_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {PARTICIPANT_TOKEN_HEADER: participant_token} if participant_token else {}
        self._http = httpx.Client(base_url=base_url, timeout=timeout, headers=headers, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TribeClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self._http.request(method, path, **kwargs)
        logger.debug("%s %s -> %s", method, path, resp.status_code)
        _raise_for_error(resp)
        return resp.json()

    # --- Requests and windows ---

    def create_request(self, category: str, title: str | None = None, note: str | None = None) -> dict:
        return self._request("POST", "/requests", json={"category": category, "title": title, "note": note})

    def get_request_snapshot(self, slug: str) -> dict:
        return self._request("GET", f"/requests/{slug}")

    def add_window(self, slug: str, display_name: str, start: str, end: str) -> dict:
        return self._request(
            "POST",
            f"/requests/{slug}/windows",
            json={"display_name": display_name, "start": start, "end": end},
        )

    def promote_plan(self, slug: str, start: str, end: str, location: str | None = None) -> dict:
        return self._request(
            "POST",
            f"/requests/{slug}/plans",
            json={"start": start, "end": end, "location": location},
        )

    # --- Plans ---

    def get_plan_snapshot(self, slug: str) -> dict:
        return self._request("GET", f"/plans/{slug}")

    def set_response(
        self,
        slug: str,
        display_name: str,
        status: str | None = None,
        arrival: str | None = None,
    ) -> dict:
        body: dict[str, Any] = {"display_name": display_name}
        if status is not None:
            body["status"] = status
        if arrival is not None:
            body["arrival"] = arrival
        return self._request("PUT", f"/plans/{slug}/response", json=body)

    def claim_item(self, slug: str, item: str, display_name: str) -> dict:
        return self._request("POST", f"/plans/{slug}/claims/claim", json={"item": item, "display_name": display_name})

    def unclaim_item(self, slug: str, item: str, display_name: str) -> dict:
        return self._request("POST", f"/plans/{slug}/claims/unclaim", json={"item": item, "display_name": display_name})
