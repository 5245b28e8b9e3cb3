"""Server commands for stackctl CLI."""

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
from stackctl.services.iaas.utils import get_server_name
from stackctl.services.iaas.wait import delete_server_wait_handler

logger = logging.getLogger(__name__)


@click.group(name="server")
def server_group():
    """Manage servers."""
    pass


@server_group.command(name="delete")
@click.argument("server_id", callback=validate_uuid)
@click.pass_context
def delete_server(ctx: click.Context, server_id: str) -> None:
    """Delete a server.

    \b
    EXAMPLES:
    \b
    # Delete server with ID "xxx"
    $ stackctl server delete xxx
    """
    flags = get_global_flags(ctx)
    try:
        project_id = resolve_project_id(flags)
        client = iaas_client(flags)
        delete_resource(
            flags,
            "server",
            server_id,
            resolve_name=lambda: get_server_name(client, project_id, server_id),
            delete=lambda: client.delete_server(project_id, server_id),
            wait_handler=lambda: delete_server_wait_handler(client, project_id, server_id),
        )
    except StackctlError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
