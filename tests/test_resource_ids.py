"""Tests for sdk/resource_ids.py — building, parsing and classifying ARM ids."""

from __future__ import annotations

from anf_snapshot_policy.sdk import resource_ids as rid

SUB = "sub-1"
VOLUME = (
    "/subscriptions/sub-1/resourceGroups/anf-rg/providers/Microsoft.NetApp"
    "/netAppAccounts/acct/capacityPools/Pool01/volumes/vol1"
)


def test_build_ids_nest():
    account = rid.account_id(SUB, "anf-rg", "acct")
    pool = rid.pool_id(SUB, "anf-rg", "acct", "Pool01")
    volume = rid.volume_id(SUB, "anf-rg", "acct", "Pool01", "vol1")
    assert account == "/subscriptions/sub-1/resourceGroups/anf-rg/providers/Microsoft.NetApp/netAppAccounts/acct"
    assert pool.startswith(account + "/")
    assert volume == VOLUME


def test_subnet_id():
    assert rid.subnet_id(SUB, "net-rg", "vnet", "sn") == (
        "/subscriptions/sub-1/resourceGroups/net-rg/providers/Microsoft.Network/virtualNetworks/vnet/subnets/sn"
    )


def test_parse_segments():
    assert rid.get_subscription(VOLUME) == "sub-1"
    assert rid.get_resource_group(VOLUME) == "anf-rg"
    assert rid.get_anf_account(VOLUME) == "acct"
    assert rid.get_anf_capacity_pool(VOLUME) == "Pool01"
    assert rid.get_anf_volume(VOLUME) == "vol1"
    assert rid.get_anf_snapshot_policy(VOLUME) is None


def test_parse_is_case_insensitive():
    assert rid.get_resource_group(VOLUME.replace("resourceGroups", "resourcegroups")) == "anf-rg"


def test_classification():
    account = rid.account_id(SUB, "anf-rg", "acct")
    pool = rid.pool_id(SUB, "anf-rg", "acct", "Pool01")
    policy = f"{account}/snapshotPolicies/policy1"

    assert rid.is_anf_account(account)
    assert rid.is_anf_capacity_pool(pool) and not rid.is_anf_account(pool)
    assert rid.is_anf_volume(VOLUME) and not rid.is_anf_capacity_pool(VOLUME)
    assert rid.is_anf_snapshot_policy(policy)


def test_network_ids_are_not_anf():
    subnet = rid.subnet_id(SUB, "net-rg", "vnet", "sn")
    assert not rid.is_anf_resource(subnet)
    assert not rid.is_anf_volume(subnet)
