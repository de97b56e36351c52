"""Tests for config loading and validation."""

from __future__ import annotations

import pytest

from config import DEFAULT_ALLOWED_ORIGIN, DEFAULT_SITE_NAME, ConfigError, FormsConfig, get_config, reset_config_cache

REQUIRED_ENV = {
    "AZURE_TENANT_ID": "tenant-123",
    "AZURE_CLIENT_ID": "client-abc",
    "AZURE_CLIENT_SECRET": "secret-xyz",
    "TURNSTILE_SECRET_KEY": "turnstile-secret",
}

OPTIONAL_ENV = (
    "ALLOWED_ORIGIN",
    "M365_SENDER_EMAIL",
    "RECIPIENT_EMAIL",
    "SHAREPOINT_SITE_ID",
    "SHAREPOINT_LIST_ID",
    "HTTP_TIMEOUT_SECONDS",
    "SITE_NAME",
)


def _apply_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in OPTIONAL_ENV:
        monkeypatch.delenv(key, raising=False)
    for key, value in REQUIRED_ENV.items():
        monkeypatch.setenv(key, value)


def test_get_config_parses_values(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://forms.example.com/")
    monkeypatch.setenv("M365_SENDER_EMAIL", " noreply@example.com ")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "7.5")

    config = get_config(load_dotenv_file=False)

    assert config.azure_tenant_id == "tenant-123"
    assert config.allowed_origin == "https://forms.example.com"
    assert config.allowed_hostname == "forms.example.com"
    assert config.sender_email == "noreply@example.com"
    assert config.recipient_email is None
    assert config.http_timeout_seconds == 7.5


def test_get_config_defaults_origin_and_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)

    config = get_config(load_dotenv_file=False)

    assert config.allowed_origin == DEFAULT_ALLOWED_ORIGIN
    assert config.allowed_hostname == "www.hybe.tech"
    assert config.http_timeout_seconds is None


def test_get_config_missing_required_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)
    monkeypatch.delenv("TURNSTILE_SECRET_KEY", raising=False)

    with pytest.raises(ConfigError):
        get_config(load_dotenv_file=False)


def test_get_config_rejects_relative_origin(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)
    monkeypatch.setenv("ALLOWED_ORIGIN", "www.hybe.tech")

    with pytest.raises(ConfigError):
        get_config(load_dotenv_file=False)


def test_get_config_rejects_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "0")

    with pytest.raises(ConfigError):
        get_config(load_dotenv_file=False)


def test_endpoint_settings_are_checked_on_demand(forms_config: FormsConfig) -> None:
    assert forms_config.require_contact_settings() == ("noreply@hybe.tech", "hello@hybe.tech")
    assert forms_config.require_subscription_settings() == ("site-1", "list-1")

    bare = FormsConfig(
        azure_tenant_id="t",
        azure_client_id="c",
        azure_client_secret="s",
        turnstile_secret_key="k",
        allowed_origin=DEFAULT_ALLOWED_ORIGIN,
    )
    with pytest.raises(ConfigError):
        bare.require_contact_settings()
    with pytest.raises(ConfigError):
        bare.require_subscription_settings()


def test_site_name_and_domain_for_display(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_config_cache()
    _apply_required_env(monkeypatch)

    config = get_config(load_dotenv_file=False)

    assert config.site_name == DEFAULT_SITE_NAME == "Hybetech"
    assert config.site_domain == "hybe.tech"

    reset_config_cache()
    monkeypatch.setenv("SITE_NAME", " Forms Co ")
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://forms.example.com")

    config = get_config(load_dotenv_file=False)

    assert config.site_name == "Forms Co"
    assert config.site_domain == "forms.example.com"
