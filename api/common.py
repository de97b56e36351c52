"""Wiring shared by the serverless form endpoints."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

import requests

from config import ConfigError, FormsConfig, resolve_allowed_origin
from services.graph_client import GraphClient
from services.observability import LogContext, get_logger, new_request_id
from services.pipeline import FormPipeline
from services.request_context import get_http_method
from services.responses import METHOD_NOT_ALLOWED, EndpointMessages, ResponseBuilder
from services.token_cache import ClientCredentialProvider, TokenCache
from services.turnstile import TurnstileVerifier


def build_graph_client(
    config: FormsConfig,
    *,
    session: Any,
    clock: Callable[[], float] | None = None,
) -> GraphClient:
    provider = ClientCredentialProvider(
        tenant_id=config.azure_tenant_id,
        client_id=config.azure_client_id,
        client_secret=config.azure_client_secret,
        session=session,
        timeout=config.http_timeout_seconds,
    )
    token_cache = TokenCache(provider, clock=clock or time.time)
    return GraphClient(token_cache, session=session, timeout=config.http_timeout_seconds)


def build_verifier(config: FormsConfig, *, session: Any) -> TurnstileVerifier:
    return TurnstileVerifier(
        secret_key=config.turnstile_secret_key,
        expected_hostname=config.allowed_hostname,
        session=session,
        timeout=config.http_timeout_seconds,
    )


def new_session() -> requests.Session:
    return requests.Session()


def serve(
    event: Mapping[str, Any],
    *,
    endpoint: str,
    messages: EndpointMessages,
    pipeline_factory: Callable[[], FormPipeline[Any]],
) -> dict[str, Any]:
    """Run the endpoint pipeline; a misconfigured process still honours the method contract."""
    try:
        pipeline = pipeline_factory()
    except ConfigError:
        return _misconfigured_response(event, endpoint=endpoint, messages=messages)
    return pipeline.handle(event).to_proxy_result()


def _misconfigured_response(
    event: Mapping[str, Any],
    *,
    endpoint: str,
    messages: EndpointMessages,
) -> dict[str, Any]:
    method = get_http_method(event).upper()
    get_logger().error(
        "config_error",
        context=LogContext(request_id=new_request_id(), endpoint=endpoint),
        method=method,
    )
    responses = ResponseBuilder(resolve_allowed_origin())
    if method == "OPTIONS":
        return responses.preflight().to_proxy_result()
    if method != "POST":
        return responses.error(405, METHOD_NOT_ALLOWED).to_proxy_result()
    return responses.error(500, messages.server_error).to_proxy_result()
