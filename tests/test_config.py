"""Tests for config.py — settings, schedule rules and the run context."""

from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from anf_snapshot_policy.config import (
    MIN_POOL_SIZE_BYTES,
    MIN_VOLUME_SIZE_BYTES,
    MonthlyRule,
    RunContext,
    Settings,
    WeeklyRule,
)

from .conftest import SUBSCRIPTION_ID


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.location == "westus"
    assert s.service_level == "Standard"
    assert s.pool_size_bytes == 4398046511104
    assert s.volume_size_bytes == 107374182400
    assert s.protocol_types == ["NFSv3"]
    assert s.poll_interval_seconds == 60
    assert s.poll_retries == 50
    assert s.cleanup_resources is False
    assert s.policy_enabled is True


def test_default_schedule() -> None:
    sched = Settings(_env_file=None).snapshot_schedule
    assert sched.hourly.minute == 50
    assert (sched.daily.hour, sched.daily.minute) == (22, 0)
    assert (sched.weekly.day, sched.weekly.hour, sched.weekly.minute) == ("Friday", 23, 0)
    assert sched.monthly.days_of_month == "1,15,25"
    assert (sched.monthly.hour, sched.monthly.minute) == (8, 0)
    for rule in (sched.hourly, sched.daily, sched.weekly, sched.monthly):
        assert rule.snapshots_to_keep == 5


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANF_LOCATION", "eastus")
    monkeypatch.setenv("ANF_POLL_RETRIES", "7")
    monkeypatch.setenv("ANF_CLEANUP_RESOURCES", "true")
    monkeypatch.setenv("AZURE_AUTH_LOCATION", "/tmp/auth.json")
    s = Settings(_env_file=None)
    assert s.location == "eastus"
    assert s.poll_retries == 7
    assert s.cleanup_resources is True
    assert s.auth_location == "/tmp/auth.json"


def test_kwargs_beat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANF_POOL_NAME", "EnvPool")
    s = Settings(_env_file=None, pool_name="CliPool", auth_location="/cli/auth.json")
    assert s.pool_name == "CliPool"
    assert s.auth_location == "/cli/auth.json"


def test_rejects_unknown_service_level() -> None:
    with pytest.raises(ValidationError, match="service_level"):
        Settings(_env_file=None, service_level="Gold")


def test_rejects_undersized_pool_and_volume() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, pool_size_bytes=MIN_POOL_SIZE_BYTES - 1)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, volume_size_bytes=MIN_VOLUME_SIZE_BYTES - 1)


def test_rejects_zero_retries() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, poll_retries=0)


def test_weekly_day_normalised() -> None:
    assert WeeklyRule(day="friday").day == "Friday"
    assert WeeklyRule(day="monday, friday").day == "Monday,Friday"
    with pytest.raises(ValidationError):
        WeeklyRule(day="Someday")


def test_monthly_days_validated() -> None:
    assert MonthlyRule(days_of_month="01, 15").days_of_month == "1,15"
    with pytest.raises(ValidationError):
        MonthlyRule(days_of_month="32")
    with pytest.raises(ValidationError):
        MonthlyRule(days_of_month="")


def test_hour_range_validated() -> None:
    with pytest.raises(ValidationError):
        MonthlyRule(hour=24)


def test_run_context_from_settings(settings: Settings) -> None:
    ctx = RunContext.from_settings(settings, SUBSCRIPTION_ID)
    assert ctx.account_name == "anf-test-acct"
    assert ctx.volume_name == "NFSv3-Vol-anf-test-acct-Pool01"
    assert ctx.subnet_id == (
        f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/anf-rg"
        "/providers/Microsoft.Network/virtualNetworks/westus-vnet/subnets/anf-sn"
    )
    assert ctx.account_id == ctx.pool_id == ctx.volume_id == ""
    assert ctx.created == []


def test_run_context_generates_account_name() -> None:
    ctx = RunContext.from_settings(Settings(_env_file=None), SUBSCRIPTION_ID)
    assert re.fullmatch(r"anf-[a-z]+-[a-z]+-\d{4}", ctx.account_name)
    assert ctx.volume_name == f"NFSv3-Vol-{ctx.account_name}-Pool01"


def test_fill_ids_from_names(ctx: RunContext) -> None:
    ctx.fill_ids_from_names()
    assert ctx.account_id.endswith("/providers/Microsoft.NetApp/netAppAccounts/anf-test-acct")
    assert ctx.pool_id == f"{ctx.account_id}/capacityPools/Pool01"
    assert ctx.volume_id == f"{ctx.pool_id}/volumes/NFSv3-Vol-anf-test-acct-Pool01"
