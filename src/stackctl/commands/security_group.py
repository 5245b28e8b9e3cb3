"""Security group commands for stackctl CLI."""

import logging
import sys

import click

from stackctl.commands._helpers import (
    delete_resource,
    get_global_flags,
    iaas_client,
    resolve_project_id,
    validate_uuid,
)
from stackctl.exceptions import StackctlError
from stackctl.services.iaas.utils import get_security_group_name
from stackctl.services.iaas.wait import delete_security_group_wait_handler

logger = logging.getLogger(__name__)


@click.group(name="security-group")
def security_group_group():
    """Manage security groups."""
    pass


@security_group_group.command(name="delete")
@click.argument("security_group_id", callback=validate_uuid)
@click.pass_context
def delete_security_group(ctx: click.Context, security_group_id: str) -> None:
    """Delete a security group.

    \b
    EXAMPLES:
    \b
    # Delete security group with ID "xxx"
    $ stackctl security-group delete xxx
    """
    flags = get_global_flags(ctx)
    try:
        project_id = resolve_project_id(flags)
        client = iaas_client(flags)
        delete_resource(
            flags,
            "security group",
            security_group_id,
            resolve_name=lambda: get_security_group_name(client, project_id, security_group_id),
            delete=lambda: client.delete_security_group(project_id, security_group_id),
            wait_handler=lambda: delete_security_group_wait_handler(
                client, project_id, security_group_id
            ),
        )
    except StackctlError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
