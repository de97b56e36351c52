"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from config import FormsConfig
from tests.fakes import FakeClock, FakeSession


@pytest.fixture
def forms_config() -> FormsConfig:
    return FormsConfig(
        azure_tenant_id="tenant-123",
        azure_client_id="client-abc",
        azure_client_secret="secret-xyz",
        turnstile_secret_key="turnstile-secret",
        allowed_origin="https://www.hybe.tech",
        sender_email="noreply@hybe.tech",
        recipient_email="hello@hybe.tech",
        sharepoint_site_id="site-1",
        sharepoint_list_id="list-1",
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_800_000_000.0)
