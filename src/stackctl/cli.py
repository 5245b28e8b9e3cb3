"""Command-line entry point for stackctl.

Global options live on the root group and are handed to every command
through a GlobalFlags object on the click context.
"""

import logging

import click

from stackctl import __version__
from stackctl.click_group import StackctlGroup
from stackctl.commands import (
    config_group,
    mongodbflex_group,
    network_group,
    security_group_group,
    server_group,
    volume_group,
)
from stackctl.commands._helpers import GlobalFlags, validate_uuid


@click.group(
    cls=StackctlGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.option("--project-id", callback=validate_uuid, help="Project ID (overrides config)")
@click.option("--region", help="Region, e.g. eu01 (overrides config)")
@click.option("--assume-yes", "-y", is_flag=True, help="Skip confirmation prompts")
@click.option(
    "--async", "async_mode", is_flag=True, help="Return without waiting for the operation"
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.option("--config", help="Config file path", type=click.Path())
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    project_id: str | None,
    region: str | None,
    assume_yes: bool,
    async_mode: bool,
    verbose: bool,
    config: str | None,
) -> None:
    """stackctl - manage cloud resources from the command line.

    \b
    EXAMPLES:
        # Create a MongoDB Flex instance with 2 CPUs and 8 GB RAM
        $ stackctl mongodbflex instance create --name db --cpu 2 --ram 8 --acl 0.0.0.0/0

    \b
        # Delete a volume without confirmation
        $ stackctl -y volume delete xxx

    \b
    CONFIGURATION:
        Config file: ~/.stackctl/config.toml
        Set defaults: stackctl config set --project-id xxx --region eu01
        Access token: STACKCTL_ACCESS_TOKEN environment variable

    For help on any command: stackctl <command> --help
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format="%(message)s"
    )
    if not verbose:
        # Keep HTTP connection noise out of normal output
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    ctx.obj = GlobalFlags(
        project_id=project_id,
        region=region,
        assume_yes=assume_yes,
        async_mode=async_mode,
        verbose=verbose,
        config=config,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


main.add_command(mongodbflex_group)
main.add_command(volume_group)
main.add_command(network_group)
main.add_command(security_group_group)
main.add_command(server_group)
main.add_command(config_group)


if __name__ == "__main__":
    main()
