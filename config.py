"""Centralized configuration loading for the form endpoints."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""


DEFAULT_ALLOWED_ORIGIN = "https://www.hybe.tech"
DEFAULT_SITE_NAME = "Hybetech"


@dataclass(frozen=True)
class FormsConfig:
    """Typed endpoint configuration loaded from environment variables."""

    azure_tenant_id: str
    azure_client_id: str
    azure_client_secret: str
    turnstile_secret_key: str
    allowed_origin: str
    sender_email: str | None = None
    recipient_email: str | None = None
    sharepoint_site_id: str | None = None
    sharepoint_list_id: str | None = None
    http_timeout_seconds: float | None = None
    site_name: str = DEFAULT_SITE_NAME

    @property
    def allowed_hostname(self) -> str:
        """Hostname the CAPTCHA provider must report for a valid token."""
        return urlparse(self.allowed_origin).hostname or ""

    @property
    def site_domain(self) -> str:
        """Bare domain shown to readers, e.g. hybe.tech for https://www.hybe.tech."""
        return self.allowed_hostname.removeprefix("www.")

    def require_contact_settings(self) -> tuple[str, str]:
        """Return (sender, recipient) or raise when the contact endpoint is unconfigured."""
        if not self.sender_email:
            raise ConfigError("Missing required environment variable: M365_SENDER_EMAIL")
        if not self.recipient_email:
            raise ConfigError("Missing required environment variable: RECIPIENT_EMAIL")
        return self.sender_email, self.recipient_email

    def require_subscription_settings(self) -> tuple[str, str]:
        """Return (site_id, list_id) or raise when the newsletter endpoint is unconfigured."""
        if not self.sharepoint_site_id:
            raise ConfigError("Missing required environment variable: SHAREPOINT_SITE_ID")
        if not self.sharepoint_list_id:
            raise ConfigError("Missing required environment variable: SHAREPOINT_LIST_ID")
        return self.sharepoint_site_id, self.sharepoint_list_id


_REQUIRED_ENV_VARS = (
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "TURNSTILE_SECRET_KEY",
)


def _get_required_env(name: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        raise ConfigError(f"Missing required environment variable: {name}")
    return raw.strip()


def _get_optional_env(name: str) -> str | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _parse_positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: {raw!r}") from exc

    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {value}")
    return value


def _parse_origin(raw: str) -> str:
    parsed = urlparse(raw)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigError(f"ALLOWED_ORIGIN must be an absolute http(s) URL, got {raw!r}")
    return raw.rstrip("/")


def resolve_allowed_origin() -> str:
    """Read ALLOWED_ORIGIN alone, falling back to the default when unset or invalid."""
    raw = _get_optional_env("ALLOWED_ORIGIN")
    if raw is None:
        return DEFAULT_ALLOWED_ORIGIN
    try:
        return _parse_origin(raw)
    except ConfigError:
        return DEFAULT_ALLOWED_ORIGIN


def _validate_required_envs() -> None:
    for name in _REQUIRED_ENV_VARS:
        _get_required_env(name)


@lru_cache(maxsize=1)
def get_config(load_dotenv_file: bool = True) -> FormsConfig:
    """Load and cache endpoint configuration."""
    if load_dotenv_file:
        load_dotenv()

    _validate_required_envs()

    timeout_raw = _get_optional_env("HTTP_TIMEOUT_SECONDS")
    http_timeout_seconds = (
        _parse_positive_float("HTTP_TIMEOUT_SECONDS", timeout_raw) if timeout_raw else None
    )

    return FormsConfig(
        azure_tenant_id=_get_required_env("AZURE_TENANT_ID"),
        azure_client_id=_get_required_env("AZURE_CLIENT_ID"),
        azure_client_secret=_get_required_env("AZURE_CLIENT_SECRET"),
        turnstile_secret_key=_get_required_env("TURNSTILE_SECRET_KEY"),
        allowed_origin=_parse_origin(_get_optional_env("ALLOWED_ORIGIN") or DEFAULT_ALLOWED_ORIGIN),
        sender_email=_get_optional_env("M365_SENDER_EMAIL"),
        recipient_email=_get_optional_env("RECIPIENT_EMAIL"),
        sharepoint_site_id=_get_optional_env("SHAREPOINT_SITE_ID"),
        sharepoint_list_id=_get_optional_env("SHAREPOINT_LIST_ID"),
        http_timeout_seconds=http_timeout_seconds,
        site_name=_get_optional_env("SITE_NAME") or DEFAULT_SITE_NAME,
    )


def reset_config_cache() -> None:
    """Clear memoized configuration for tests and process reloads."""
    get_config.cache_clear()
