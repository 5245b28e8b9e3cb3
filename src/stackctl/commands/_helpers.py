"""Shared plumbing for stackctl commands.

Public API:
    GlobalFlags: Values of the root command's options
    get_global_flags: Read GlobalFlags from the click context
    validate_uuid: click callback accepting only UUID arguments
    resolve_project_id / resolve_region: Flag value, else config value
    mongodbflex_client / iaas_client: API clients configured from the config file
    confirm_or_abort: Confirmation prompt honouring --assume-yes
    run_with_spinner: Run a wait handler under a rich status spinner
    delete_resource: The common label, confirm, delete, wait, print flow
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click
from rich.console import Console

from stackctl.config_manager import ConfigManager
from stackctl.exceptions import CollaboratorError, InputError, ProjectIdError, StackctlError
from stackctl.labels import get_label
from stackctl.services.iaas.client import IaaSClient
from stackctl.services.mongodbflex.client import MongoDBFlexClient
from stackctl.wait import WaitHandler

logger = logging.getLogger(__name__)

console = Console()


@dataclass
class GlobalFlags:
    project_id: str | None = None
    region: str | None = None
    assume_yes: bool = False
    async_mode: bool = False
    verbose: bool = False
    config: str | None = None


def get_global_flags(ctx: click.Context) -> GlobalFlags:
    flags = ctx.find_object(GlobalFlags)
    return flags if flags is not None else GlobalFlags()


def validate_uuid(_ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """click callback: accept only UUIDs, keep the value as given."""
    if value is None:
        return None
    try:
        uuid.UUID(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a valid UUID", param=param) from None
    return value


def resolve_project_id(flags: GlobalFlags) -> str:
    """Project ID from --project-id or the config file.

    Raises:
        ProjectIdError: If neither provides one
        InputError: If the configured value is not a UUID
    """
    project_id = ConfigManager.get_project_id(flags.project_id, flags.config)
    if not project_id:
        raise ProjectIdError()
    try:
        uuid.UUID(project_id)
    except ValueError:
        raise InputError(f"Project ID '{project_id}' is not a valid UUID") from None
    return project_id


def resolve_region(flags: GlobalFlags) -> str:
    return ConfigManager.get_region(flags.region, flags.config)


def mongodbflex_client(flags: GlobalFlags) -> MongoDBFlexClient:
    config = ConfigManager.load_config(flags.config)
    return MongoDBFlexClient(
        endpoint=config.mongodbflex_custom_endpoint, timeout=config.request_timeout
    )


def iaas_client(flags: GlobalFlags) -> IaaSClient:
    config = ConfigManager.load_config(flags.config)
    return IaaSClient(endpoint=config.iaas_custom_endpoint, timeout=config.request_timeout)


def confirm_or_abort(flags: GlobalFlags, prompt: str) -> bool:
    """Ask for confirmation unless --assume-yes was given.

    Returns:
        True to proceed, False if the user declined
    """
    if flags.assume_yes:
        return True
    if click.confirm(prompt, default=False):
        return True
    click.echo("Aborted.")
    return False


def run_with_spinner(handler: WaitHandler, message: str) -> Any:
    with console.status(f"[dim]{message}...[/dim]"):
        return handler.wait()


def delete_resource(
    flags: GlobalFlags,
    kind: str,
    resource_id: str,
    resolve_name: Callable[[], str],
    delete: Callable[[], None],
    wait_handler: Callable[[], WaitHandler] | None,
    prompt_suffix: str = "",
) -> None:
    """Run the shared delete flow for a single resource.

    Resolves a label (falling back to the ID), asks for confirmation, sends
    the delete request and, unless --async is set or there is nothing to
    wait for, waits for completion.
    """
    label = get_label(resolve_name, resource_id)

    prompt = f"Are you sure you want to delete {kind} \"{label}\"?{prompt_suffix}"
    if not confirm_or_abort(flags, prompt):
        return

    try:
        delete()
    except StackctlError as e:
        raise CollaboratorError(f"delete {kind}", resource_id, e) from e

    if wait_handler is None:
        click.echo(f"Deleted {kind} \"{label}\"")
        return

    if not flags.async_mode:
        try:
            run_with_spinner(wait_handler(), f"Deleting {kind}")
        except StackctlError as e:
            raise CollaboratorError(f"wait for {kind} deletion", resource_id, e) from e

    operation_state = "Triggered deletion of" if flags.async_mode else "Deleted"
    click.echo(f"{operation_state} {kind} \"{label}\"")


__all__ = [
    "GlobalFlags",
    "confirm_or_abort",
    "console",
    "delete_resource",
    "get_global_flags",
    "iaas_client",
    "mongodbflex_client",
    "resolve_project_id",
    "resolve_region",
    "run_with_spinner",
    "validate_uuid",
]
