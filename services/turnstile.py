"""Cloudflare Turnstile verification with hostname pinning."""

from __future__ import annotations

from typing import Any

import requests

from models import VerificationFailure, VerificationResult

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class TurnstileVerifier:
    """Check a client challenge token against the Turnstile siteverify API.

    Failures come back as a ``VerificationResult``; the caller owns logging.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        expected_hostname: str,
        session: Any | None = None,
        timeout: float | None = None,
        verify_url: str = TURNSTILE_VERIFY_URL,
    ) -> None:
        self._secret_key = secret_key
        self._expected_hostname = expected_hostname
        self._session = session or requests.Session()
        self._timeout = timeout
        self._verify_url = verify_url

    def verify(self, token: str, client_ip: str, request_id: str) -> VerificationResult:
        try:
            response = self._session.post(
                self._verify_url,
                data={
                    "secret": self._secret_key,
                    "response": token,
                    "remoteip": client_ip,
                },
                timeout=self._timeout,
            )
            result = response.json()
        except (requests.RequestException, ValueError):
            # Exception text can echo the form payload; it is dropped.
            return VerificationResult.failed(VerificationFailure.SERVICE_ERROR)

        if not isinstance(result, dict) or result.get("success") is not True:
            error_codes = result.get("error-codes") if isinstance(result, dict) else None
            return VerificationResult.failed(
                VerificationFailure.VERIFICATION_FAILED,
                _error_codes(error_codes),
            )

        hostname = result.get("hostname")
        if hostname and hostname != self._expected_hostname:
            return VerificationResult.failed(VerificationFailure.HOSTNAME_MISMATCH)

        return VerificationResult.passed()


def _error_codes(error_codes: Any) -> tuple[str, ...]:
    if isinstance(error_codes, list) and error_codes:
        return tuple(str(code) for code in error_codes)
    return ("unknown",)
