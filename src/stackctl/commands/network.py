"""Network commands for stackctl CLI.

- network delete: Delete a network
"""

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
from stackctl.services.iaas.utils import get_network_name
from stackctl.services.iaas.wait import delete_network_wait_handler

logger = logging.getLogger(__name__)


@click.group(name="network")
def network_group():
    """Manage networks."""
    pass


@network_group.command(name="delete")
@click.argument("network_id", callback=validate_uuid)
@click.pass_context
def delete_network(ctx: click.Context, network_id: str) -> None:
    """Delete a network.

    If the network is still in use, the deletion will fail.

    \b
    EXAMPLES:
    \b
    # Delete network with ID "xxx"
    $ stackctl network delete xxx
    """
    flags = get_global_flags(ctx)
    try:
        project_id = resolve_project_id(flags)
        client = iaas_client(flags)
        delete_resource(
            flags,
            "network",
            network_id,
            resolve_name=lambda: get_network_name(client, project_id, network_id),
            delete=lambda: client.delete_network(project_id, network_id),
            wait_handler=lambda: delete_network_wait_handler(client, project_id, network_id),
        )
    except StackctlError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
