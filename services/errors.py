"""Error taxonomy for form request handling."""

from __future__ import annotations

from models import FieldFailure, VerificationFailure


class FormError(Exception):
    """Base class for failures that end a form request early."""


class ClientInputError(FormError):
    """Raised when the request body or transport metadata is unusable."""

    def __init__(self, reason: str, failures: tuple[FieldFailure, ...] = ()) -> None:
        super().__init__(reason)
        self.reason = reason
        self.failures = failures


class VerificationError(FormError):
    """Raised when the CAPTCHA gate rejects a request."""

    def __init__(
        self, reason: VerificationFailure, error_codes: tuple[str, ...] = ()
    ) -> None:
        super().__init__(reason.value)
        self.reason = reason
        self.error_codes = error_codes


class UpstreamError(FormError):
    """Raised when an external dependency cannot complete the request."""

    tag = "UPSTREAM_ERROR"


class TokenAcquisitionError(UpstreamError):
    """Raised when the identity provider does not return a usable token."""

    tag = "TOKEN_ACQUISITION_FAILED"


class DownstreamError(UpstreamError):
    """Raised on a non-2xx response from the mail or list API."""

    def __init__(self, operation: str, status_code: int, tag: str = "GRAPH_API_ERROR") -> None:
        super().__init__(f"{operation} returned {status_code}")
        self.operation = operation
        self.status_code = status_code
        self.tag = tag


class MethodNotAllowedError(FormError):
    """Raised for HTTP methods other than POST and OPTIONS."""
