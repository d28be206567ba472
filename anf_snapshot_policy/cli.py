"""CLI entry point — Click-based command line for the ANF snapshot policy sample."""

from __future__ import annotations

import sys
from typing import Any, Optional

import click
from pydantic import ValidationError

from . import __version__
from .common import (
    TransactionLog,
    confirm,
    die,
    init_logging,
    print_detail,
    print_header,
    print_info,
    print_success,
)
from .config import RunContext, Settings
from .exceptions import AnfSampleError, ConfigError
from .sdk.auth import AzureClients, read_auth_file


def _load_settings(**overrides: Any) -> Settings:
    """Build settings; CLI values that were not given fall back to env/defaults."""
    given = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**given)
    except ValidationError as exc:
        die(f"invalid configuration: {exc}")


def _connect(settings: Settings) -> AzureClients:
    try:
        auth = read_auth_file(settings.auth_location or None)
    except ConfigError as exc:
        die(f"an error occurred getting non-sensitive info from AzureAuthFile: {exc}")
    return AzureClients(auth)


@click.group()
@click.version_option(__version__, prog_name="anf-snapshot-policy")
def cli() -> None:
    """Azure NetApp Files snapshot policy sample."""


# Options shared by both commands
_common_options = [
    click.option("--auth-file", "auth_location", default=None,
                 help="Auth descriptor path (default: $AZURE_AUTH_LOCATION)."),
    click.option("--resource-group", default=None, help="Resource group holding the ANF account."),
    click.option("--account-name", default=None, help="NetApp account name."),
    click.option("--pool-name", default=None, help="Capacity pool name."),
    click.option("--volume-name", default=None, help="Volume name."),
    click.option("--poll-interval", "poll_interval_seconds", type=float, default=None,
                 help="Seconds between readiness polls."),
    click.option("--poll-retries", type=int, default=None, help="Readiness poll attempts."),
    click.option("--log-dir", type=click.Path(file_okay=False), default=None,
                 help="Directory for the run log and JSON transaction log."),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@cli.command()
@common_options
@click.option("--location", default=None, help="Azure region, e.g. westus.")
@click.option("--snapshot-policy-name", default=None, help="Snapshot policy name.")
@click.option("--cleanup/--no-cleanup", "cleanup_resources", default=None,
              help="Delete everything again after a successful run.")
def run(**options: Any) -> None:
    """Create account, capacity pool, snapshot policy and a volume using it.

    \b
    The delegated subnet must exist before running. Cleanup is off by
    default and never runs after a failed step; use the 'cleanup'
    command to remove leftovers by hand.

    \b
    Examples:
        anf-snapshot-policy run
        anf-snapshot-policy run --location eastus --cleanup
    """
    from .services.cleanup import finalize
    from .services.provisioner import run_provisioning

    settings = _load_settings(**options)

    print_header(
        "Azure NetApp Files Python Snapshot Policy SDK Sample - "
        "sample application that enables a Snapshot Policy on an NFSv3 volume."
    )
    log_file = init_logging("anf-sample", settings.effective_log_dir)

    clients = _connect(settings)
    ctx = RunContext.from_settings(settings, clients.subscription_id)

    txlog = TransactionLog("anf-provision", settings.effective_log_dir)
    result = run_provisioning(clients, settings, ctx, txlog)

    cleanup_log: Optional[TransactionLog] = None
    if result.should_clean_up and settings.cleanup_resources:
        cleanup_log = TransactionLog("anf-cleanup", settings.effective_log_dir)
    exit_code = finalize(clients, result, settings, cleanup_log)

    print_detail(f"Log file: {log_file}")
    print_detail(f"JSON log: {txlog.path}")
    sys.exit(exit_code)


@cli.command()
@common_options
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def cleanup(yes: bool, **options: Any) -> None:
    """Delete a volume, its capacity pool and the account, in that order.

    \b
    For runs that stopped part-way: names the resources of an earlier
    run explicitly and removes them without provisioning anything.
    """
    from .services.cleanup import run_cleanup

    if not options.get("account_name"):
        raise click.UsageError("--account-name is required for cleanup")

    settings = _load_settings(**options)
    print_header("Azure NetApp Files cleanup")
    log_file = init_logging("anf-cleanup", settings.effective_log_dir)

    clients = _connect(settings)
    ctx = RunContext.from_settings(settings, clients.subscription_id)
    ctx.fill_ids_from_names()

    print_info("The following resources will be deleted:")
    for resource_id in (ctx.volume_id, ctx.pool_id, ctx.account_id):
        print_detail(resource_id)
    if not yes and not confirm("Proceed with deletion?"):
        print_info("Aborted by user.")
        sys.exit(0)

    txlog = TransactionLog("anf-cleanup", settings.effective_log_dir)
    try:
        run_cleanup(clients, ctx, settings, txlog)
    except AnfSampleError as exc:
        txlog.step_update("failed", str(exc))
        txlog.finalize("failed", str(exc))
        die(str(exc))
    txlog.finalize("success", "cleanup completed")
    print_success("Cleanup completed!")
    print_detail(f"Log file: {log_file}")


if __name__ == "__main__":
    cli()
