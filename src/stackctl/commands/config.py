"""Configuration commands for stackctl CLI.

This module provides commands for the persistent configuration file:
- config show: Print the current configuration
- config set: Persist default values
- config unset: Reset values to their defaults
"""

import logging
import sys

import click
from rich.table import Table

from stackctl.commands._helpers import console, get_global_flags, validate_uuid
from stackctl.config_manager import ConfigManager, StackctlConfig
from stackctl.exceptions import ConfigError

logger = logging.getLogger(__name__)


@click.group(name="config")
def config_group():
    """Manage the stackctl configuration file."""
    pass


@config_group.command(name="show")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the current configuration."""
    flags = get_global_flags(ctx)
    try:
        config = ConfigManager.load_config(flags.config)
        config_path = ConfigManager.get_config_path(flags.config)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    table = Table(title=str(config_path), show_header=True, header_style="bold cyan")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    values = config.to_dict()
    for key in StackctlConfig.keys():
        table.add_row(key, str(values.get(key, "-")))
    console.print(table)


@config_group.command(name="set")
@click.option("--project-id", callback=validate_uuid, help="Default project ID")
@click.option("--region", help="Default region (e.g. eu01)")
@click.option("--mongodbflex-custom-endpoint", help="MongoDB Flex API endpoint override")
@click.option("--iaas-custom-endpoint", help="IaaS API endpoint override")
@click.option("--request-timeout", type=click.IntRange(min=1), help="HTTP timeout in seconds")
@click.pass_context
def set_config(
    ctx: click.Context,
    project_id: str | None,
    region: str | None,
    mongodbflex_custom_endpoint: str | None,
    iaas_custom_endpoint: str | None,
    request_timeout: int | None,
) -> None:
    """Set configuration values.

    \b
    EXAMPLES:
    \b
    # Persist a default project
    $ stackctl config set --project-id xxx
    \b
    # Use another region and a longer timeout
    $ stackctl config set --region eu02 --request-timeout 60
    """
    updates = {
        key: value
        for key, value in {
            "project_id": project_id,
            "region": region,
            "mongodbflex_custom_endpoint": mongodbflex_custom_endpoint,
            "iaas_custom_endpoint": iaas_custom_endpoint,
            "request_timeout": request_timeout,
        }.items()
        if value is not None
    }
    if not updates:
        click.echo("Error: Please specify at least one value to set.", err=True)
        sys.exit(1)

    flags = get_global_flags(ctx)
    try:
        ConfigManager.update_config(flags.config, **updates)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for key, value in updates.items():
        click.echo(f"Set {key} = {value}")


@config_group.command(name="unset")
@click.option("--project-id", is_flag=True, help="Unset the default project ID")
@click.option("--region", is_flag=True, help="Reset the region to its default")
@click.option("--mongodbflex-custom-endpoint", is_flag=True, help="Unset the endpoint override")
@click.option("--iaas-custom-endpoint", is_flag=True, help="Unset the endpoint override")
@click.option("--request-timeout", is_flag=True, help="Unset the HTTP timeout")
@click.pass_context
def unset_config(
    ctx: click.Context,
    project_id: bool,
    region: bool,
    mongodbflex_custom_endpoint: bool,
    iaas_custom_endpoint: bool,
    request_timeout: bool,
) -> None:
    """Unset configuration values."""
    selected = {
        "project_id": project_id,
        "region": region,
        "mongodbflex_custom_endpoint": mongodbflex_custom_endpoint,
        "iaas_custom_endpoint": iaas_custom_endpoint,
        "request_timeout": request_timeout,
    }
    keys = [key for key, chosen in selected.items() if chosen]
    if not keys:
        click.echo("Error: Please specify at least one value to unset.", err=True)
        sys.exit(1)

    flags = get_global_flags(ctx)
    try:
        ConfigManager.unset_config(*keys, custom_path=flags.config)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for key in keys:
        click.echo(f"Unset {key}")
