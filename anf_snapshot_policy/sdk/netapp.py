"""NetApp Files operations — one SDK call per function.

Create and delete calls block on the long-running operation poller
(``begin_*().result()``). Errors from ``azure.core.exceptions`` are left
to the caller, which decides whether they end the current phase.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from azure.mgmt.netapp.models import (
    CapacityPool,
    DailySchedule,
    ExportPolicyRule,
    HourlySchedule,
    MonthlySchedule,
    NetAppAccount,
    SnapshotPolicy,
    Volume,
    VolumePropertiesDataProtection,
    VolumePropertiesExportPolicy,
    VolumeSnapshotProperties,
    WeeklySchedule,
)

from ..config import SnapshotSchedule
from .auth import AzureClients

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Generic lookup
# ---------------------------------------------------------------------------


def get_resource_by_id(clients: AzureClients, resource_id: str, api_version: str) -> Any:
    """Read any ARM resource by id. Raises ``ResourceNotFoundError`` if absent."""
    return clients.resources.resources.get_by_id(resource_id, api_version)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def create_account(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    location: str,
    tags: Optional[dict[str, str]] = None,
) -> NetAppAccount:
    body = NetAppAccount(location=location, tags=tags)
    logger.debug("create account %s/%s", resource_group, account_name)
    return clients.netapp.accounts.begin_create_or_update(
        resource_group, account_name, body
    ).result()


def create_capacity_pool(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    pool_name: str,
    location: str,
    service_level: str,
    size_bytes: int,
    tags: Optional[dict[str, str]] = None,
) -> CapacityPool:
    body = CapacityPool(
        location=location,
        service_level=service_level,
        size=size_bytes,
        tags=tags,
    )
    logger.debug("create pool %s/%s/%s", resource_group, account_name, pool_name)
    return clients.netapp.pools.begin_create_or_update(
        resource_group, account_name, pool_name, body
    ).result()


def build_snapshot_policy(
    location: str,
    schedule: SnapshotSchedule,
    enabled: bool = True,
    tags: Optional[dict[str, str]] = None,
) -> SnapshotPolicy:
    """Translate the configured schedule rules into the SDK policy body."""
    return SnapshotPolicy(
        location=location,
        hourly_schedule=HourlySchedule(
            minute=schedule.hourly.minute,
            snapshots_to_keep=schedule.hourly.snapshots_to_keep,
        ),
        daily_schedule=DailySchedule(
            hour=schedule.daily.hour,
            minute=schedule.daily.minute,
            snapshots_to_keep=schedule.daily.snapshots_to_keep,
        ),
        weekly_schedule=WeeklySchedule(
            day=schedule.weekly.day,
            hour=schedule.weekly.hour,
            minute=schedule.weekly.minute,
            snapshots_to_keep=schedule.weekly.snapshots_to_keep,
        ),
        monthly_schedule=MonthlySchedule(
            days_of_month=schedule.monthly.days_of_month,
            hour=schedule.monthly.hour,
            minute=schedule.monthly.minute,
            snapshots_to_keep=schedule.monthly.snapshots_to_keep,
        ),
        enabled=enabled,
        tags=tags,
    )


def create_snapshot_policy(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    policy_name: str,
    body: SnapshotPolicy,
) -> SnapshotPolicy:
    logger.debug("create snapshot policy %s/%s/%s", resource_group, account_name, policy_name)
    return clients.netapp.snapshot_policies.create(
        resource_group, account_name, policy_name, body
    )


def create_volume(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    pool_name: str,
    volume_name: str,
    location: str,
    service_level: str,
    subnet_id: str,
    protocol_types: list[str],
    size_bytes: int,
    snapshot_policy_id: str = "",
    tags: Optional[dict[str, str]] = None,
) -> Volume:
    """Create an NFS volume, attaching *snapshot_policy_id* when given."""
    export_policy = VolumePropertiesExportPolicy(rules=[
        ExportPolicyRule(
            rule_index=1,
            allowed_clients="0.0.0.0/0",
            cifs=False,
            nfsv3="NFSv3" in protocol_types,
            nfsv41="NFSv4.1" in protocol_types,
            unix_read_only=False,
            unix_read_write=True,
        )
    ])

    data_protection = None
    if snapshot_policy_id:
        data_protection = VolumePropertiesDataProtection(
            snapshot=VolumeSnapshotProperties(snapshot_policy_id=snapshot_policy_id)
        )

    body = Volume(
        location=location,
        creation_token=volume_name,
        service_level=service_level,
        subnet_id=subnet_id,
        protocol_types=protocol_types,
        usage_threshold=size_bytes,
        export_policy=export_policy,
        data_protection=data_protection,
        tags=tags,
    )
    logger.debug("create volume %s/%s/%s/%s", resource_group, account_name, pool_name, volume_name)
    return clients.netapp.volumes.begin_create_or_update(
        resource_group, account_name, pool_name, volume_name, body
    ).result()


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def delete_volume_replication(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    pool_name: str,
    volume_name: str,
) -> None:
    clients.netapp.volumes.begin_delete_replication(
        resource_group, account_name, pool_name, volume_name
    ).result()


def delete_volume(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    pool_name: str,
    volume_name: str,
) -> None:
    clients.netapp.volumes.begin_delete(
        resource_group, account_name, pool_name, volume_name
    ).result()


def delete_capacity_pool(
    clients: AzureClients,
    resource_group: str,
    account_name: str,
    pool_name: str,
) -> None:
    clients.netapp.pools.begin_delete(resource_group, account_name, pool_name).result()


def delete_account(clients: AzureClients, resource_group: str, account_name: str) -> None:
    clients.netapp.accounts.begin_delete(resource_group, account_name).result()
