"""Readiness polling — fixed interval, fixed attempt count.

There is no backoff: each attempt sleeps ``interval`` seconds and then
reads the resource once. Running out of attempts raises
:class:`~anf_snapshot_policy.exceptions.ReadinessTimeout`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from azure.core.exceptions import AzureError, HttpResponseError, ResourceNotFoundError

from ..exceptions import ProvisioningError, ReadinessTimeout
from ..sdk import resource_ids
from ..sdk.auth import AzureClients

logger = logging.getLogger(__name__)

READY_STATES = ("succeeded",)
FAILED_STATES = ("failed",)


def _getter(clients: AzureClients, resource_id: str, replication: bool) -> Callable[[], Any]:
    """Pick the SDK read call matching the kind of *resource_id*."""
    rg = resource_ids.get_resource_group(resource_id)
    account = resource_ids.get_anf_account(resource_id)
    netapp = clients.netapp

    if resource_ids.is_anf_volume(resource_id):
        pool = resource_ids.get_anf_capacity_pool(resource_id)
        volume = resource_ids.get_anf_volume(resource_id)
        if replication:
            return lambda: netapp.volumes.replication_status(rg, account, pool, volume)
        return lambda: netapp.volumes.get(rg, account, pool, volume)
    if replication:
        raise ValueError(f"replication status only applies to volumes: {resource_id}")
    if resource_ids.is_anf_capacity_pool(resource_id):
        pool = resource_ids.get_anf_capacity_pool(resource_id)
        return lambda: netapp.pools.get(rg, account, pool)
    if resource_ids.is_anf_snapshot_policy(resource_id):
        policy = resource_ids.get_anf_snapshot_policy(resource_id)
        return lambda: netapp.snapshot_policies.get(rg, account, policy)
    if resource_ids.is_anf_account(resource_id):
        return lambda: netapp.accounts.get(rg, account)
    raise ValueError(f"not an Azure NetApp Files resource id: {resource_id}")


def _is_ready(resource_id: str, resource: Any) -> bool:
    state = getattr(resource, "provisioning_state", None)
    # Replication status and some resources carry no provisioning state
    if not isinstance(state, str):
        return True
    if state.lower() in FAILED_STATES:
        raise ProvisioningError(f"{resource_id} provisioning state is {state}")
    return state.lower() in READY_STATES


def wait_for_anf_resource(
    clients: AzureClients,
    resource_id: str,
    interval: float = 60,
    retries: int = 50,
    replication: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Poll until *resource_id* can be read and reports a ready state.

    With ``replication=True`` the volume's replication status is polled
    instead. Returns the last read resource. A resource reporting the
    ``Failed`` provisioning state raises :class:`ProvisioningError` at once;
    read errors, transport failures included, use up one attempt.
    """
    get = _getter(clients, resource_id, replication)
    for attempt in range(1, retries + 1):
        sleep(interval)
        try:
            resource = get()
        except AzureError as exc:
            logger.debug("%s not readable yet (attempt %d/%d): %s", resource_id, attempt, retries, exc)
            continue
        if _is_ready(resource_id, resource):
            logger.info("%s ready after %d attempt(s)", resource_id, attempt)
            return resource
        logger.debug(
            "%s provisioning state %s (attempt %d/%d)",
            resource_id, getattr(resource, "provisioning_state", None), attempt, retries,
        )
    raise ReadinessTimeout(resource_id, retries, "ready")


def wait_for_no_anf_resource(
    clients: AzureClients,
    resource_id: str,
    interval: float = 60,
    retries: int = 50,
    replication: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Poll until *resource_id* is gone.

    A not-found read ends the wait. With ``replication=True`` any failed
    replication status read by the service means the replication object
    is gone. Other errors, transport failures included, use up one attempt.
    """
    get = _getter(clients, resource_id, replication)
    for attempt in range(1, retries + 1):
        sleep(interval)
        try:
            get()
        except ResourceNotFoundError:
            logger.info("%s gone after %d attempt(s)", resource_id, attempt)
            return
        except AzureError as exc:
            if replication and isinstance(exc, HttpResponseError):
                logger.info("%s replication gone after %d attempt(s)", resource_id, attempt)
                return
            logger.warning(
                "%s lookup failed (attempt %d/%d): %s", resource_id, attempt, retries, exc,
            )
    raise ReadinessTimeout(resource_id, retries, "deleted")
