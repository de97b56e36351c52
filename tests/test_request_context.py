"""Tests for gateway event normalization."""

from __future__ import annotations

from services.request_context import extract_request, get_client_ip, get_http_method
from tests.fakes import http_api_event, rest_api_event


def test_http_api_event_shape_is_preferred() -> None:
    event = http_api_event(method="POST", source_ip="203.0.113.7", body="{}")
    event["httpMethod"] = "GET"
    event["requestContext"]["identity"] = {"sourceIp": "10.0.0.1"}

    request = extract_request(event)

    assert request.method == "POST"
    assert request.client_ip == "203.0.113.7"
    assert request.body == "{}"


def test_rest_api_event_shape() -> None:
    request = extract_request(rest_api_event(method="OPTIONS", source_ip="198.51.100.4"))

    assert request.method == "OPTIONS"
    assert request.client_ip == "198.51.100.4"
    assert request.user_agent == ""


def test_forwarded_for_fallback_is_case_insensitive() -> None:
    event = rest_api_event(
        source_ip=None,
        headers={"X-FORWARDED-FOR": " 192.0.2.10 , 10.0.0.2"},
    )

    assert get_client_ip(event) == "192.0.2.10"


def test_missing_address_resolves_to_empty_string() -> None:
    assert get_client_ip({"headers": None, "requestContext": {}}) == ""
    assert get_client_ip({}) == ""


def test_method_defaults_to_empty_string() -> None:
    assert get_http_method({}) == ""


def test_user_agent_is_truncated_then_stripped() -> None:
    raw = "<script>\"x'\\" + "a" * 300
    event = http_api_event(headers={"User-Agent": raw})

    user_agent = extract_request(event).user_agent

    assert user_agent == ("script" + "x" + "a" * 300)[: 255 - 5]
    assert not any(char in user_agent for char in "<>\"'\\")
