"""Azure Resource Manager id helpers for NetApp Files resources.

ANF ids look like::

    /subscriptions/<sub>/resourceGroups/<rg>/providers/Microsoft.NetApp/
        netAppAccounts/<account>/capacityPools/<pool>/volumes/<volume>

Lookups of segment names are case-insensitive, as ARM itself is.
"""

from __future__ import annotations

from typing import Optional

NETAPP_PROVIDER = "Microsoft.NetApp"
NETWORK_PROVIDER = "Microsoft.Network"


def account_id(subscription_id: str, resource_group: str, account_name: str) -> str:
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{NETAPP_PROVIDER}/netAppAccounts/{account_name}"
    )


def pool_id(subscription_id: str, resource_group: str, account_name: str, pool_name: str) -> str:
    return f"{account_id(subscription_id, resource_group, account_name)}/capacityPools/{pool_name}"


def volume_id(
    subscription_id: str,
    resource_group: str,
    account_name: str,
    pool_name: str,
    volume_name: str,
) -> str:
    return f"{pool_id(subscription_id, resource_group, account_name, pool_name)}/volumes/{volume_name}"


def subnet_id(subscription_id: str, resource_group: str, vnet_name: str, subnet_name: str) -> str:
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{NETWORK_PROVIDER}/virtualNetworks/{vnet_name}/subnets/{subnet_name}"
    )


def _segments(resource_id: str) -> list[str]:
    return [s for s in resource_id.strip().split("/") if s]


def get_segment(resource_id: str, key: str) -> Optional[str]:
    """Return the value following *key* in *resource_id*, or None."""
    parts = _segments(resource_id)
    for i, part in enumerate(parts[:-1]):
        if part.lower() == key.lower():
            return parts[i + 1]
    return None


def get_subscription(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "subscriptions")


def get_resource_group(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "resourceGroups")


def get_anf_account(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "netAppAccounts")


def get_anf_capacity_pool(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "capacityPools")


def get_anf_volume(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "volumes")


def get_anf_snapshot_policy(resource_id: str) -> Optional[str]:
    return get_segment(resource_id, "snapshotPolicies")


def _last_type(resource_id: str) -> str:
    parts = _segments(resource_id)
    if len(parts) < 2:
        return ""
    return parts[-2].lower()


def is_anf_resource(resource_id: str) -> bool:
    return (get_segment(resource_id, "providers") or "").lower() == NETAPP_PROVIDER.lower()


def is_anf_account(resource_id: str) -> bool:
    return is_anf_resource(resource_id) and _last_type(resource_id) == "netappaccounts"


def is_anf_capacity_pool(resource_id: str) -> bool:
    return is_anf_resource(resource_id) and _last_type(resource_id) == "capacitypools"


def is_anf_volume(resource_id: str) -> bool:
    return is_anf_resource(resource_id) and _last_type(resource_id) == "volumes"


def is_anf_snapshot_policy(resource_id: str) -> bool:
    return is_anf_resource(resource_id) and _last_type(resource_id) == "snapshotpolicies"
