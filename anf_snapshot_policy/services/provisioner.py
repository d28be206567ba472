"""Provisioning sequence — subnet check, account, pool, snapshot policy, volume.

Steps run strictly in order and each one needs the previous to succeed.
The first failure ends the run: resources created so far are left in
place and ``should_clean_up`` stays false, so they must be removed by
hand (``anf-snapshot-policy cleanup``).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError

from ..common import TransactionLog, print_error, print_step, print_success
from ..config import VIRTUAL_NETWORKS_API_VERSION, RunContext, Settings
from ..exceptions import AnfSampleError, PreconditionError, ProvisioningError, ReadinessTimeout
from ..sdk import netapp
from ..sdk.auth import AzureClients
from .polling import wait_for_anf_resource

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Outcome of :func:`run_provisioning`, consumed by the cleanup guard."""

    context: RunContext
    success: bool = False
    should_clean_up: bool = False
    failed_step: str = ""
    error: Optional[AnfSampleError] = None


def run_provisioning(
    clients: AzureClients,
    settings: Settings,
    ctx: RunContext,
    txlog: Optional[TransactionLog] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ProvisionResult:
    """Run every provisioning step in order and report the outcome."""
    result = ProvisionResult(context=ctx)
    if txlog is None:
        txlog = TransactionLog("anf-provision", persist=False)

    try:
        check_subnet(clients, ctx, txlog)
        create_account(clients, settings, ctx, txlog)
        create_capacity_pool(clients, settings, ctx, txlog)
        create_snapshot_policy(clients, settings, ctx, txlog)
        create_volume(clients, settings, ctx, txlog)
        wait_for_volume(clients, settings, ctx, txlog, sleep)
    except AnfSampleError as exc:
        result.failed_step = exc.step
        result.error = exc
        logger.debug("provisioning stopped at %s, created so far: %s", exc.step, ctx.created)
        print_error(str(exc))
        txlog.step_update("failed", str(exc))
        txlog.finalize("failed", str(exc))
        return result

    result.success = True
    result.should_clean_up = True
    txlog.finalize("success", f"volume {ctx.volume_id} ready with snapshot policy {ctx.snapshot_policy_id}")
    return result


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def check_subnet(clients: AzureClients, ctx: RunContext, txlog: TransactionLog) -> None:
    """Fail before any creation if the delegated subnet does not exist."""
    txlog.step("check-subnet", "Check delegated subnet exists")
    print_step(f"Checking if vnet/subnet {ctx.subnet_id} exists.")
    try:
        netapp.get_resource_by_id(clients, ctx.subnet_id, VIRTUAL_NETWORKS_API_VERSION)
    except ResourceNotFoundError as exc:
        raise PreconditionError(f"subnet {ctx.subnet_id} not found: {exc.message}", step="check-subnet") from exc
    except AzureError as exc:
        raise PreconditionError(
            f"an error occurred trying to check if {ctx.subnet_id} subnet exists: {exc}",
            step="check-subnet",
        ) from exc
    txlog.step_update("done", ctx.subnet_id)


def _created_id(resource: Any, step: str) -> str:
    resource_id = getattr(resource, "id", None)
    if not resource_id:
        raise ProvisioningError("service returned no resource id", step=step)
    return resource_id


def create_account(
    clients: AzureClients, settings: Settings, ctx: RunContext, txlog: TransactionLog
) -> None:
    txlog.step("create-account", "Create NetApp account")
    print_step(f"Creating Azure NetApp Files account {ctx.account_name}...")
    try:
        account = netapp.create_account(
            clients, ctx.resource_group, ctx.account_name, ctx.location, settings.tags
        )
    except AzureError as exc:
        raise ProvisioningError(f"an error occurred while creating account: {exc}", step="create-account") from exc
    ctx.account_id = _created_id(account, "create-account")
    ctx.created.append(ctx.account_id)
    print_success(f"Account successfully created, resource id: {ctx.account_id}")
    txlog.step_update("done", ctx.account_id)


def create_capacity_pool(
    clients: AzureClients, settings: Settings, ctx: RunContext, txlog: TransactionLog
) -> None:
    txlog.step("create-pool", "Create capacity pool")
    print_step(f"Creating Capacity Pool {ctx.pool_name}...")
    try:
        pool = netapp.create_capacity_pool(
            clients,
            ctx.resource_group,
            ctx.account_name,
            ctx.pool_name,
            ctx.location,
            settings.service_level,
            settings.pool_size_bytes,
            settings.tags,
        )
    except AzureError as exc:
        raise ProvisioningError(f"an error occurred while creating capacity pool: {exc}", step="create-pool") from exc
    ctx.pool_id = _created_id(pool, "create-pool")
    ctx.created.append(ctx.pool_id)
    print_success(f"Capacity Pool successfully created, resource id: {ctx.pool_id}")
    txlog.step_update("done", ctx.pool_id)


def create_snapshot_policy(
    clients: AzureClients, settings: Settings, ctx: RunContext, txlog: TransactionLog
) -> None:
    txlog.step("create-snapshot-policy", "Create snapshot policy")
    print_step(f"Creating Snapshot Policy {ctx.snapshot_policy_name}...")
    body = netapp.build_snapshot_policy(
        ctx.location, settings.snapshot_schedule, settings.policy_enabled, settings.tags
    )
    try:
        policy = netapp.create_snapshot_policy(
            clients, ctx.resource_group, ctx.account_name, ctx.snapshot_policy_name, body
        )
    except AzureError as exc:
        raise ProvisioningError(
            f"an error occurred while creating snapshot policy: {exc}", step="create-snapshot-policy"
        ) from exc
    ctx.snapshot_policy_id = _created_id(policy, "create-snapshot-policy")
    ctx.created.append(ctx.snapshot_policy_id)
    print_success(f"Snapshot Policy successfully created, resource id: {ctx.snapshot_policy_id}")
    txlog.step_update("done", ctx.snapshot_policy_id)


def create_volume(
    clients: AzureClients, settings: Settings, ctx: RunContext, txlog: TransactionLog
) -> None:
    txlog.step("create-volume", "Create volume with snapshot policy attached")
    print_step(
        f"Creating {'/'.join(settings.protocol_types)} Volume {ctx.volume_name} "
        f"with Snapshot Policy {ctx.snapshot_policy_name} attached..."
    )
    try:
        volume = netapp.create_volume(
            clients,
            ctx.resource_group,
            ctx.account_name,
            ctx.pool_name,
            ctx.volume_name,
            ctx.location,
            settings.service_level,
            ctx.subnet_id,
            settings.protocol_types,
            settings.volume_size_bytes,
            snapshot_policy_id=ctx.snapshot_policy_id,
            tags=settings.tags,
        )
    except AzureError as exc:
        raise ProvisioningError(f"an error occurred while creating volume: {exc}", step="create-volume") from exc
    ctx.volume_id = _created_id(volume, "create-volume")
    ctx.created.append(ctx.volume_id)
    print_success(f"Volume successfully created, resource id: {ctx.volume_id}")
    txlog.step_update("done", ctx.volume_id)


def wait_for_volume(
    clients: AzureClients,
    settings: Settings,
    ctx: RunContext,
    txlog: TransactionLog,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    txlog.step("wait-volume", "Wait for volume to be ready")
    print_step("Waiting for volume to be ready...")
    try:
        wait_for_anf_resource(
            clients,
            ctx.volume_id,
            interval=settings.poll_interval_seconds,
            retries=settings.poll_retries,
            sleep=sleep,
        )
    except (ReadinessTimeout, ProvisioningError) as exc:
        exc.step = "wait-volume"
        raise
    except AzureError as exc:
        raise ProvisioningError(f"an error occurred while waiting for volume: {exc}", step="wait-volume") from exc
    print_success("Volume is ready")
    txlog.step_update("done")
