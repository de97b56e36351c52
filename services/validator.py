"""Request body parsing, schema validation and input sanitization."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from jsonschema import Draft202012Validator, FormatChecker

from models import ContactSubmission, FieldFailure, InterestCategory, SubscriptionRequest
from services.errors import ClientInputError
from services.schemas import CONTACT_SCHEMA, SUBSCRIPTION_SCHEMA

T = TypeVar("T")

DEFAULT_SUBSCRIPTION_SOURCE = "Website Footer"

EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[a-z0-9_'+\-.]*[a-z0-9_+\-]@(?:[a-z0-9][a-z0-9\-]*\.)+[a-z]{2,}$",
    re.IGNORECASE,
)
_HTML_TAG = re.compile(r"<[^>]*>")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_QUOTES_AND_BACKSLASH = re.compile(r"['\"\\]")
_SOURCE_UNSAFE = re.compile(r"[<>\"'\\]")

_FORMAT_CHECKER = FormatChecker(formats=())


@_FORMAT_CHECKER.checks("email")
def _is_email(value: object) -> bool:
    if not isinstance(value, str):
        return True
    return bool(EMAIL_PATTERN.match(value))


_CONTACT_VALIDATOR = Draft202012Validator(CONTACT_SCHEMA, format_checker=_FORMAT_CHECKER)
_SUBSCRIPTION_VALIDATOR = Draft202012Validator(SUBSCRIPTION_SCHEMA, format_checker=_FORMAT_CHECKER)


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a normalized value or the list of field failures."""

    value: T | None = None
    failures: tuple[FieldFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.failures


def parse_json_body(raw_body: str | None, *, require_body: bool) -> Any:
    """Decode a request body.

    A missing body raises ``missing_body`` when ``require_body`` is set and
    otherwise decodes as an empty object.
    """
    if raw_body is None or not raw_body.strip():
        if require_body:
            raise ClientInputError("missing_body")
        return {}
    try:
        return json.loads(raw_body)
    except json.JSONDecodeError as exc:
        raise ClientInputError("invalid_json") from exc


def strip_html(value: str) -> str:
    return _ANGLE_BRACKETS.sub("", _HTML_TAG.sub("", value)).strip()


def sanitize_input(value: str) -> str:
    """Strip markup and the characters that could break out of a query literal."""
    return _QUOTES_AND_BACKSLASH.sub("", strip_html(value))


def validate_contact(payload: Any) -> ValidationResult[ContactSubmission]:
    normalized = _trim_strings(payload)
    failures = _collect_failures(_CONTACT_VALIDATOR, normalized)
    if failures:
        return ValidationResult(failures=failures)

    company = normalized.get("company")
    phone = normalized.get("phone")
    return ValidationResult(
        value=ContactSubmission(
            first_name=sanitize_input(normalized["firstName"]),
            last_name=sanitize_input(normalized["lastName"]),
            email=normalized["email"].lower(),
            message=strip_html(normalized["message"]),
            turnstile_token=normalized["turnstileToken"],
            company=sanitize_input(company) if company else None,
            phone=sanitize_input(phone) if phone else None,
            interest=InterestCategory(normalized.get("interest", "")),
        )
    )


def validate_subscription(payload: Any) -> ValidationResult[SubscriptionRequest]:
    normalized = _trim_strings(payload)
    failures = _collect_failures(_SUBSCRIPTION_VALIDATOR, normalized)
    if failures:
        return ValidationResult(failures=failures)

    source = normalized.get("source", DEFAULT_SUBSCRIPTION_SOURCE)
    return ValidationResult(
        value=SubscriptionRequest(
            email=normalized["email"].lower(),
            turnstile_token=normalized["turnstileToken"],
            source=_SOURCE_UNSAFE.sub("", source),
        )
    )


def _trim_strings(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return payload
    return {k: v.strip() if isinstance(v, str) else v for k, v in payload.items()}


def _collect_failures(validator: Draft202012Validator, instance: Any) -> tuple[FieldFailure, ...]:
    """Reduce schema errors to (field, rule) pairs.

    ``ValidationError.message`` embeds the offending value, so it is never kept.
    """
    failures: list[FieldFailure] = []
    for error in validator.iter_errors(instance):
        if error.validator == "required" and isinstance(instance, dict):
            for name in error.validator_value:
                if name not in instance:
                    failures.append(FieldFailure(field=str(name), rule="required"))
            continue
        field_name = ".".join(str(part) for part in error.absolute_path) or "body"
        failures.append(FieldFailure(field=field_name, rule=str(error.validator)))
    return tuple(sorted(set(failures), key=lambda item: (item.field, item.rule)))
