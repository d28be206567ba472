"""Sample configuration — loads from environment, .env file and CLI flags.

Precedence (highest first):
  1. CLI flags  (passed to :class:`Settings` as keyword arguments)
  2. ``ANF_*`` environment variables or a ``.env`` file
  3. Defaults defined here
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from .sdk import resource_ids
from .services.naming import default_volume_name, generate_account_name

TIB = 1024**4
GIB = 1024**3

MIN_POOL_SIZE_BYTES = 4 * TIB
MIN_VOLUME_SIZE_BYTES = 100 * GIB

SERVICE_LEVELS = ("Standard", "Premium", "Ultra")
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Network API version used for the subnet lookup
VIRTUAL_NETWORKS_API_VERSION = "2019-09-01"


# ---------------------------------------------------------------------------
# Snapshot schedule rules
# ---------------------------------------------------------------------------


class HourlyRule(BaseModel):
    minute: int = Field(50, ge=0, le=59)
    snapshots_to_keep: int = Field(5, ge=1, le=255)


class DailyRule(BaseModel):
    hour: int = Field(22, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    snapshots_to_keep: int = Field(5, ge=1, le=255)


class WeeklyRule(BaseModel):
    day: str = "Friday"
    hour: int = Field(23, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    snapshots_to_keep: int = Field(5, ge=1, le=255)

    @field_validator("day")
    @classmethod
    def _check_day(cls, v: str) -> str:
        days = [d.strip().capitalize() for d in v.split(",") if d.strip()]
        if not days or any(d not in WEEKDAYS for d in days):
            raise ValueError(f"day must be a comma-separated list of {', '.join(WEEKDAYS)}")
        return ",".join(days)


class MonthlyRule(BaseModel):
    days_of_month: str = "1,15,25"
    hour: int = Field(8, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    snapshots_to_keep: int = Field(5, ge=1, le=255)

    @field_validator("days_of_month")
    @classmethod
    def _check_days(cls, v: str) -> str:
        parts = [p.strip() for p in v.split(",") if p.strip()]
        if not parts or not all(re.fullmatch(r"\d{1,2}", p) and 1 <= int(p) <= 31 for p in parts):
            raise ValueError("days_of_month must be a comma-separated list of days 1-31")
        return ",".join(str(int(p)) for p in parts)


class SnapshotSchedule(BaseModel):
    """The four rules of the snapshot policy.

    Defaults: every hour at minute 50, every day at 22:00, every Friday
    at 23:00 and on the 1st, 15th and 25th of each month at 08:00. Each
    rule keeps 5 snapshots.
    """

    hourly: HourlyRule = Field(default_factory=HourlyRule)
    daily: DailyRule = Field(default_factory=DailyRule)
    weekly: WeeklyRule = Field(default_factory=WeeklyRule)
    monthly: MonthlyRule = Field(default_factory=MonthlyRule)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Sample settings — populated from env vars or .env file."""

    # Auth descriptor (az ad sp create-for-rbac --sdk-auth output)
    auth_location: str = Field(
        "",
        validation_alias=AliasChoices("AZURE_AUTH_LOCATION", "auth_location"),
    )

    # Placement
    location: str = "westus"
    resource_group: str = "anf-rg"

    # Delegated subnet (must exist before running)
    vnet_resource_group: str = "anf-rg"
    vnet_name: str = "westus-vnet"
    subnet_name: str = "anf-sn"

    # ANF resources — empty names are generated at run time
    account_name: str = ""
    pool_name: str = "Pool01"
    volume_name: str = ""
    snapshot_policy_name: str = "snapshotpolicy01"
    service_level: str = "Standard"
    pool_size_bytes: int = MIN_POOL_SIZE_BYTES
    volume_size_bytes: int = MIN_VOLUME_SIZE_BYTES
    protocol_types: list[str] = Field(default_factory=lambda: ["NFSv3"])
    tags: dict[str, str] = Field(
        default_factory=lambda: {
            "Author": "ANF Python Snapshot Policy SDK Sample",
            "Service": "Azure Netapp Files",
        }
    )

    # Snapshot policy
    snapshot_schedule: SnapshotSchedule = Field(default_factory=SnapshotSchedule)
    policy_enabled: bool = True

    # Polling
    poll_interval_seconds: float = Field(60, ge=0)
    poll_retries: int = Field(50, ge=1)

    # Cleanup is opt-in; a failed run never cleans up
    cleanup_resources: bool = False

    # Logs
    log_dir: str = ""

    model_config = {"env_prefix": "ANF_", "env_file": ".env", "extra": "ignore"}

    @field_validator("service_level")
    @classmethod
    def _check_service_level(cls, v: str) -> str:
        if v not in SERVICE_LEVELS:
            raise ValueError(f"service_level must be one of {', '.join(SERVICE_LEVELS)}")
        return v

    @field_validator("pool_size_bytes")
    @classmethod
    def _check_pool_size(cls, v: int) -> int:
        if v < MIN_POOL_SIZE_BYTES:
            raise ValueError(f"pool_size_bytes must be at least {MIN_POOL_SIZE_BYTES} (4 TiB)")
        return v

    @field_validator("volume_size_bytes")
    @classmethod
    def _check_volume_size(cls, v: int) -> int:
        if v < MIN_VOLUME_SIZE_BYTES:
            raise ValueError(f"volume_size_bytes must be at least {MIN_VOLUME_SIZE_BYTES} (100 GiB)")
        return v

    @property
    def effective_log_dir(self) -> Path:
        if self.log_dir:
            return Path(self.log_dir)
        return Path.cwd() / "logs"


# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------


@dataclass
class RunContext:
    """Resolved names and the resource ids produced by each step.

    Built once from :class:`Settings` and threaded through provisioning
    and cleanup. Ids stay empty until the step that creates them succeeds.
    """

    subscription_id: str
    location: str
    resource_group: str
    account_name: str
    pool_name: str
    volume_name: str
    snapshot_policy_name: str
    subnet_id: str

    account_id: str = ""
    pool_id: str = ""
    snapshot_policy_id: str = ""
    volume_id: str = ""

    created: list[str] = field(default_factory=list)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        subscription_id: str,
        account_name: Optional[str] = None,
    ) -> "RunContext":
        account = account_name or settings.account_name or generate_account_name()
        volume = settings.volume_name or default_volume_name(account, settings.pool_name)
        return cls(
            subscription_id=subscription_id,
            location=settings.location,
            resource_group=settings.resource_group,
            account_name=account,
            pool_name=settings.pool_name,
            volume_name=volume,
            snapshot_policy_name=settings.snapshot_policy_name,
            subnet_id=resource_ids.subnet_id(
                subscription_id,
                settings.vnet_resource_group,
                settings.vnet_name,
                settings.subnet_name,
            ),
        )

    def fill_ids_from_names(self) -> None:
        """Compute the account, pool and volume ids without creating anything.

        Used by the manual cleanup command, where the resources were
        created by an earlier run.
        """
        self.account_id = self.account_id or resource_ids.account_id(
            self.subscription_id, self.resource_group, self.account_name
        )
        self.pool_id = self.pool_id or resource_ids.pool_id(
            self.subscription_id, self.resource_group, self.account_name, self.pool_name
        )
        self.volume_id = self.volume_id or resource_ids.volume_id(
            self.subscription_id, self.resource_group, self.account_name,
            self.pool_name, self.volume_name,
        )
