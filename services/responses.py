"""Fixed response vocabulary and security headers."""

from __future__ import annotations

from dataclasses import dataclass

from models import EndpointResponse

METHOD_NOT_ALLOWED = "Method not allowed"
INVALID_FORMAT = "Invalid request format"
ORIGIN_UNVERIFIED = "Unable to verify request origin."
VERIFICATION_FAILED = "Verification failed. Please try again."


@dataclass(frozen=True)
class EndpointMessages:
    """Client-visible text for one endpoint.

    ``missing_body`` of None means an absent body is decoded as ``{}``.
    """

    success: str
    invalid_input: str
    server_error: str
    missing_body: str | None = None


CONTACT_MESSAGES = EndpointMessages(
    success="Thank you for your message! We'll be in touch soon.",
    invalid_input="Please check your input and try again.",
    server_error="Unable to send message. Please try again later.",
    missing_body="Request body is required",
)

SUBSCRIPTION_MESSAGES = EndpointMessages(
    success="Thanks for subscribing!",
    invalid_input="Please enter a valid email address.",
    server_error="Unable to process request. Please try again later.",
)


class ResponseBuilder:
    """Build responses that all carry the same CORS and security headers."""

    def __init__(self, allowed_origin: str) -> None:
        self._allowed_origin = allowed_origin

    def headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self._allowed_origin,
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
            "Content-Type": "application/json",
            "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
        }

    def preflight(self) -> EndpointResponse:
        return EndpointResponse(status_code=204, headers=self.headers(), body=None)

    def success(self, message: str) -> EndpointResponse:
        return EndpointResponse(
            status_code=200,
            headers=self.headers(),
            body={"success": True, "message": message},
        )

    def error(self, status_code: int, message: str) -> EndpointResponse:
        return EndpointResponse(
            status_code=status_code,
            headers=self.headers(),
            body={"success": False, "error": message},
        )
