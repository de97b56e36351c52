"""Client-credential token acquisition and in-process caching."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from models import CachedCredential
from services.errors import TokenAcquisitionError

GRAPH_SCOPE = "https://graph.microsoft.com/.default"
AUTHORITY_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"

EXPIRY_BUFFER_SECONDS = 300.0
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600.0


@dataclass(frozen=True)
class AccessToken:
    """Token returned by the identity provider; lifetime may be absent."""

    token: str
    expires_in: float | None = None


class TokenProvider(Protocol):
    def acquire(self) -> AccessToken: ...


class CredentialCache(Protocol):
    def get_token(self) -> str: ...

    def refresh(self) -> str: ...


class ClientCredentialProvider:
    """OAuth2 client-credential grant against the Microsoft identity platform."""

    def __init__(
        self,
        *,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        scope: str = GRAPH_SCOPE,
        session: Any | None = None,
        timeout: float | None = None,
    ) -> None:
        self._token_url = AUTHORITY_URL.format(tenant_id=tenant_id)
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._session = session or requests.Session()
        self._timeout = timeout

    def acquire(self) -> AccessToken:
        try:
            response = self._session.post(
                self._token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "scope": self._scope,
                },
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TokenAcquisitionError("identity provider unreachable") from exc

        if not 200 <= response.status_code < 300:
            raise TokenAcquisitionError(f"identity provider returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise TokenAcquisitionError("identity provider returned invalid JSON") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise TokenAcquisitionError("identity provider returned no access token")

        expires_in = payload.get("expires_in")
        try:
            lifetime = float(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            lifetime = None
        return AccessToken(token=str(token), expires_in=lifetime)


class TokenCache:
    """Memoize a bearer token until shortly before it expires.

    One instance is shared by every request a warm process serves. The
    credential is replaced on refresh, never mutated.
    """

    def __init__(
        self,
        provider: TokenProvider,
        *,
        clock: Callable[[], float] = time.time,
        expiry_buffer_seconds: float = EXPIRY_BUFFER_SECONDS,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._expiry_buffer_seconds = expiry_buffer_seconds
        self._credential: CachedCredential | None = None
        self._lock = threading.Lock()

    def get_token(self) -> str:
        credential = self._credential
        if credential is not None and self._is_fresh(credential):
            return credential.token

        with self._lock:
            credential = self._credential
            if credential is not None and self._is_fresh(credential):
                return credential.token
            return self._refresh_locked()

    def refresh(self) -> str:
        """Fetch a new token regardless of the cached one."""
        with self._lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> str:
        issued = self._provider.acquire()
        lifetime = issued.expires_in if issued.expires_in else DEFAULT_TOKEN_LIFETIME_SECONDS
        self._credential = CachedCredential(token=issued.token, expires_at=self._clock() + lifetime)
        return issued.token

    def _is_fresh(self, credential: CachedCredential) -> bool:
        return self._clock() < credential.expires_at - self._expiry_buffer_seconds
