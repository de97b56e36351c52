"""Core typed models shared by the form pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class InterestCategory(StrEnum):
    """Interest options offered by the contact form."""

    CONSULTATION = "consultation"
    TRAINING = "training"
    IMPLEMENTATION = "implementation"
    DEVELOPMENT = "development"
    OTHER = "other"
    UNSPECIFIED = ""


class VerificationFailure(StrEnum):
    """Reason codes for a rejected CAPTCHA verification."""

    VERIFICATION_FAILED = "verification_failed"
    HOSTNAME_MISMATCH = "hostname_mismatch"
    SERVICE_ERROR = "service_error"


@dataclass(frozen=True)
class InboundRequest:
    """Transport-neutral view of an inbound gateway event."""

    method: str
    client_ip: str
    user_agent: str
    body: str | None


@dataclass(frozen=True)
class ContactSubmission:
    """Normalized contact form payload."""

    first_name: str
    last_name: str
    email: str
    message: str
    turnstile_token: str
    company: str | None = None
    phone: str | None = None
    interest: InterestCategory = InterestCategory.UNSPECIFIED

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class SubscriptionRequest:
    """Normalized newsletter signup payload."""

    email: str
    turnstile_token: str
    source: str


@dataclass(frozen=True)
class FieldFailure:
    """A single schema failure: the field and the rule it broke, never its value."""

    field: str
    rule: str


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a CAPTCHA verification call."""

    valid: bool
    reason: VerificationFailure | None = None
    error_codes: tuple[str, ...] = ()

    @classmethod
    def passed(cls) -> VerificationResult:
        return cls(valid=True)

    @classmethod
    def failed(
        cls, reason: VerificationFailure, error_codes: tuple[str, ...] = ()
    ) -> VerificationResult:
        return cls(valid=False, reason=reason, error_codes=error_codes)


@dataclass(frozen=True)
class CachedCredential:
    """Bearer token plus its absolute expiry (epoch seconds)."""

    token: str
    expires_at: float


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of a successful downstream call."""

    already_subscribed: bool = False


@dataclass(frozen=True)
class EndpointResponse:
    """HTTP-like response shape used by tests and serverless adapters."""

    status_code: int
    headers: dict[str, str]
    body: dict[str, Any] | None = field(default=None)

    def to_proxy_result(self) -> dict[str, Any]:
        """Render as an API Gateway proxy integration result."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": "" if self.body is None else json.dumps(self.body),
        }
