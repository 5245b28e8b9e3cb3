"""Volume commands for stackctl CLI.

This module provides commands for managing IaaS block storage volumes:
- volume delete: Delete a volume
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
from stackctl.services.iaas.utils import get_volume_name
from stackctl.services.iaas.wait import delete_volume_wait_handler

logger = logging.getLogger(__name__)


@click.group(name="volume")
def volume_group():
    """Manage block storage volumes."""
    pass


@volume_group.command(name="delete")
@click.argument("volume_id", callback=validate_uuid)
@click.pass_context
def delete_volume(ctx: click.Context, volume_id: str) -> None:
    """Delete a volume.

    If the volume is still in use, the deletion will fail.

    \b
    EXAMPLES:
    \b
    # Delete volume with ID "xxx"
    $ stackctl volume delete xxx
    """
    flags = get_global_flags(ctx)
    try:
        project_id = resolve_project_id(flags)
        logger.debug(f"Parsed input: project_id={project_id} volume_id={volume_id}")
        client = iaas_client(flags)
        delete_resource(
            flags,
            "volume",
            volume_id,
            resolve_name=lambda: get_volume_name(client, project_id, volume_id),
            delete=lambda: client.delete_volume(project_id, volume_id),
            wait_handler=lambda: delete_volume_wait_handler(client, project_id, volume_id),
        )
    except StackctlError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
