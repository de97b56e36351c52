"""Authenticated Microsoft Graph calls for mail and list operations."""

from __future__ import annotations

from typing import Any

import requests

from services.errors import DownstreamError
from services.token_cache import CredentialCache

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


class GraphClient:
    """Thin Graph wrapper: bearer auth from the cache, status-only errors.

    A non-2xx reply raises ``DownstreamError`` carrying the operation and
    status; response bodies may echo submitted data and are never kept.
    """

    def __init__(
        self,
        token_cache: CredentialCache,
        *,
        session: Any | None = None,
        timeout: float | None = None,
        base_url: str = GRAPH_BASE_URL,
    ) -> None:
        self._token_cache = token_cache
        self._session = session or requests.Session()
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    def send_mail(self, *, sender: str, message: dict[str, Any]) -> None:
        self._request(
            "POST",
            f"/users/{sender}/sendMail",
            operation="send_mail",
            error_tag="EMAIL_SEND_FAILED",
            json={"message": message, "saveToSentItems": True},
        )

    def find_list_items(
        self,
        *,
        site_id: str,
        list_id: str,
        filter_expression: str,
    ) -> list[dict[str, Any]]:
        response = self._request(
            "GET",
            f"/sites/{site_id}/lists/{list_id}/items",
            operation="list_lookup",
            error_tag="GRAPH_API_ERROR",
            params={"$filter": filter_expression, "$select": "id"},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise DownstreamError("list_lookup", response.status_code) from exc
        items = payload.get("value") if isinstance(payload, dict) else None
        return items if isinstance(items, list) else []

    def create_list_item(self, *, site_id: str, list_id: str, fields: dict[str, Any]) -> None:
        self._request(
            "POST",
            f"/sites/{site_id}/lists/{list_id}/items",
            operation="list_insert",
            error_tag="GRAPH_API_ERROR",
            json={"fields": fields},
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        error_tag: str,
        **kwargs: Any,
    ) -> Any:
        token = self._token_cache.get_token()
        response = self._session.request(
            method,
            f"{self._base_url}{path}",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            **kwargs,
        )
        if not 200 <= response.status_code < 300:
            raise DownstreamError(operation, response.status_code, tag=error_tag)
        return response
