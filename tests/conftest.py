"""Shared pytest fixtures."""

from __future__ import annotations

import json
import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from anf_snapshot_policy.config import RunContext, Settings
from anf_snapshot_policy.sdk import resource_ids

SUBSCRIPTION_ID = "11111111-2222-3333-4444-555555555555"


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host env vars and any .env file out of Settings."""
    for var in list(os.environ):
        if var.startswith("ANF_") or var == "AZURE_AUTH_LOCATION":
            monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def auth_file(tmp_path: Path) -> Path:
    """Create an sdk-auth style descriptor."""
    path = tmp_path / "azureauth.json"
    path.write_text(json.dumps({
        "clientId": "client-id",
        "clientSecret": "client-secret",
        "subscriptionId": SUBSCRIPTION_ID,
        "tenantId": "tenant-id",
        "activeDirectoryEndpointUrl": "https://login.microsoftonline.com",
        "resourceManagerEndpointUrl": "https://management.azure.com/",
    }))
    return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        account_name="anf-test-acct",
        resource_group="anf-rg",
        poll_interval_seconds=0,
        poll_retries=3,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def ctx(settings: Settings) -> RunContext:
    return RunContext.from_settings(settings, SUBSCRIPTION_ID)


def _poller(resource_id: str | None = None) -> MagicMock:
    poller = MagicMock()
    poller.result.return_value = SimpleNamespace(id=resource_id) if resource_id else None
    return poller


@pytest.fixture
def fake_clients() -> MagicMock:
    """Stand-in for AzureClients whose create calls return realistic ids."""
    clients = MagicMock()
    clients.subscription_id = SUBSCRIPTION_ID
    netapp = clients.netapp

    netapp.accounts.begin_create_or_update.side_effect = (
        lambda rg, account, body: _poller(resource_ids.account_id(SUBSCRIPTION_ID, rg, account))
    )
    netapp.pools.begin_create_or_update.side_effect = (
        lambda rg, account, pool, body: _poller(resource_ids.pool_id(SUBSCRIPTION_ID, rg, account, pool))
    )
    netapp.snapshot_policies.create.side_effect = (
        lambda rg, account, policy, body: SimpleNamespace(
            id=f"{resource_ids.account_id(SUBSCRIPTION_ID, rg, account)}/snapshotPolicies/{policy}"
        )
    )
    netapp.volumes.begin_create_or_update.side_effect = (
        lambda rg, account, pool, volume, body: _poller(
            resource_ids.volume_id(SUBSCRIPTION_ID, rg, account, pool, volume)
        )
    )
    netapp.volumes.get.return_value = SimpleNamespace(provisioning_state="Succeeded")
    return clients


def sdk_calls(clients: MagicMock) -> list[str]:
    """Names of the SDK methods called on *clients*, in call order."""
    return [name for name, _args, _kwargs in clients.mock_calls if "()" not in name]
