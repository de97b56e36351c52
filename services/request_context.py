"""Normalize API Gateway REST (v1) and HTTP API (v2) events."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from models import InboundRequest

USER_AGENT_MAX_LENGTH = 255
_UNSAFE_HEADER_CHARS = re.compile(r"[<>\"'\\]")


def extract_request(event: Mapping[str, Any]) -> InboundRequest:
    """Build the transport-neutral request from a raw gateway event."""
    headers = _normalize_headers(event.get("headers"))
    body = event.get("body")
    return InboundRequest(
        method=get_http_method(event),
        client_ip=get_client_ip(event, headers),
        user_agent=get_user_agent(headers),
        body=body if isinstance(body, str) else None,
    )


def get_http_method(event: Mapping[str, Any]) -> str:
    http_api_method = _http_context(event).get("method")
    if http_api_method:
        return str(http_api_method)
    return str(event.get("httpMethod") or "")


def get_client_ip(event: Mapping[str, Any], headers: dict[str, str] | None = None) -> str:
    """Resolve the caller address; an empty string means unknown."""
    http_api_ip = _http_context(event).get("sourceIp")
    if http_api_ip:
        return str(http_api_ip)

    request_context = event.get("requestContext") or {}
    identity = request_context.get("identity") or {}
    if identity.get("sourceIp"):
        return str(identity["sourceIp"])

    normalized = headers if headers is not None else _normalize_headers(event.get("headers"))
    forwarded_for = normalized.get("x-forwarded-for", "")
    if forwarded_for:
        return forwarded_for.split(",", 1)[0].strip()
    return ""


def get_user_agent(headers: dict[str, str]) -> str:
    user_agent = headers.get("user-agent", "")[:USER_AGENT_MAX_LENGTH]
    return _UNSAFE_HEADER_CHARS.sub("", user_agent)


def _http_context(event: Mapping[str, Any]) -> Mapping[str, Any]:
    request_context = event.get("requestContext") or {}
    http_context = request_context.get("http")
    return http_context if isinstance(http_context, Mapping) else {}


def _normalize_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(k).lower(): str(v) for k, v in headers.items() if v is not None}
