"""Cleanup — delete provisioned resources in reverse dependency order.

Order: volume replication → volume → capacity pool → account. Each
delete except the account's is followed by a poll until the resource is
gone. The first failure stops the cleanup; later resources stay behind.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError

from ..common import (
    TransactionLog,
    print_detail,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from ..config import RunContext, Settings
from ..exceptions import AnfSampleError, CleanupError, ReadinessTimeout
from ..sdk import netapp
from ..sdk.auth import AzureClients
from .polling import wait_for_no_anf_resource
from .provisioner import ProvisionResult

logger = logging.getLogger(__name__)

REPLICATION_MISSING_CODE = "VolumeReplicationMissing"


def is_replication_missing(exc: AzureError) -> bool:
    """True when a replication delete failed only because there is none."""
    if isinstance(exc, ResourceNotFoundError):
        return True
    code = getattr(getattr(exc, "error", None), "code", None)
    return code == REPLICATION_MISSING_CODE or REPLICATION_MISSING_CODE in str(exc)


def run_cleanup(
    clients: AzureClients,
    ctx: RunContext,
    settings: Settings,
    txlog: Optional[TransactionLog] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Delete the run's resources. Raises :class:`CleanupError` on the first failure."""
    if txlog is None:
        txlog = TransactionLog("anf-cleanup", persist=False)

    def _wait_gone(resource_id: str, step: str, replication: bool = False) -> None:
        try:
            wait_for_no_anf_resource(
                clients,
                resource_id,
                interval=settings.poll_interval_seconds,
                retries=settings.poll_retries,
                replication=replication,
                sleep=sleep,
            )
        except ReadinessTimeout as exc:
            raise CleanupError(exc.message, step=step) from exc
        except AzureError as exc:
            raise CleanupError(
                f"an error occurred while waiting for {resource_id} to be deleted: {exc}", step=step
            ) from exc

    rg, account, pool, volume = ctx.resource_group, ctx.account_name, ctx.pool_name, ctx.volume_name

    # Replication
    txlog.step("delete-replication", "Remove data protection object")
    print_step(f"Removing data protection object from {volume} volume...")
    try:
        netapp.delete_volume_replication(clients, rg, account, pool, volume)
    except AzureError as exc:
        if not is_replication_missing(exc):
            raise CleanupError(
                f"an error occurred while deleting data replication: {exc}", step="delete-replication"
            ) from exc
        print_info("No data replication found on volume")
    _wait_gone(ctx.volume_id, "delete-replication", replication=True)
    print_success("Data replication successfully deleted")
    txlog.step_update("done")

    # Volume
    txlog.step("delete-volume", "Delete volume")
    print_step(f"Removing {ctx.volume_id} volume...")
    try:
        netapp.delete_volume(clients, rg, account, pool, volume)
    except AzureError as exc:
        raise CleanupError(f"an error occurred while deleting volume: {exc}", step="delete-volume") from exc
    _wait_gone(ctx.volume_id, "delete-volume")
    print_success("Volume successfully deleted")
    txlog.step_update("done", ctx.volume_id)

    # Capacity pool
    txlog.step("delete-pool", "Delete capacity pool")
    print_step(f"Cleaning up capacity pool {ctx.pool_id}...")
    try:
        netapp.delete_capacity_pool(clients, rg, account, pool)
    except AzureError as exc:
        raise CleanupError(f"an error occurred while deleting capacity pool: {exc}", step="delete-pool") from exc
    _wait_gone(ctx.pool_id, "delete-pool")
    print_success("Capacity pool successfully deleted")
    txlog.step_update("done", ctx.pool_id)

    # Account
    txlog.step("delete-account", "Delete account")
    print_step(f"Cleaning up account {ctx.account_id}...")
    try:
        netapp.delete_account(clients, rg, account)
    except AzureError as exc:
        raise CleanupError(f"an error occurred while deleting account: {exc}", step="delete-account") from exc
    print_success("Account successfully deleted")
    txlog.step_update("done", ctx.account_id)


def finalize(
    clients: AzureClients,
    result: ProvisionResult,
    settings: Settings,
    txlog: Optional[TransactionLog] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run once after provisioning, whatever its outcome. Returns the exit code.

    Cleanup only happens when the run succeeded and cleanup is enabled.
    """
    print_info("Exiting")
    exit_code = 0 if result.success else 1

    if result.should_clean_up and settings.cleanup_resources:
        print_step("Performing clean up")
        try:
            run_cleanup(clients, result.context, settings, txlog, sleep)
        except AnfSampleError as exc:
            print_error(str(exc))
            if txlog is not None:
                txlog.step_update("failed", str(exc))
                txlog.finalize("failed", str(exc))
            return 1
        if txlog is not None:
            txlog.finalize("success", "cleanup completed")
        print_success("Cleanup completed!")
    elif result.should_clean_up:
        print_info("Cleanup disabled, resources were kept (use --cleanup to remove them)")
    elif result.context.created:
        print_warning("Run failed; these resources were left in place and need manual cleanup:")
        for resource_id in result.context.created:
            logger.warning("left in place: %s", resource_id)
            print_detail(resource_id)

    return exit_code
