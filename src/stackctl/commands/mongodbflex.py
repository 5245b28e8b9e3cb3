"""MongoDB Flex commands for stackctl CLI.

This module provides commands for managing MongoDB Flex:
- mongodbflex instance create/update/delete/describe/list
- mongodbflex options: Flavors, versions and storage options
- mongodbflex user delete
- mongodbflex backup list: Backups with the status of their latest restore
"""

import logging
import sys

import click
from rich.table import Table

from stackctl.commands._helpers import (
    GlobalFlags,
    console,
    delete_resource,
    get_global_flags,
    mongodbflex_client,
    resolve_project_id,
    resolve_region,
    run_with_spinner,
    validate_uuid,
)
from stackctl.exceptions import (
    AmbiguousFlavorTargetError,
    CollaboratorError,
    EmptyUpdateError,
    InputError,
    StackctlError,
)
from stackctl.labels import get_label
from stackctl.services.mongodbflex.payloads import (
    DEFAULT_BACKUP_SCHEDULE,
    DEFAULT_INSTANCE_TYPE,
    DEFAULT_STORAGE_CLASS,
    CreateInstanceInput,
    UpdateInstanceInput,
    build_create_payload,
    build_partial_update_payload,
    check_create_flavor_target,
)
from stackctl.services.mongodbflex.utils import (
    available_instance_types,
    get_instance_name,
    get_instance_type,
    get_restore_status,
    get_user_name,
)
from stackctl.services.mongodbflex.wait import (
    create_instance_wait_handler,
    delete_instance_wait_handler,
    update_instance_wait_handler,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_SIZE = 10


def _split_acl(acl: tuple[str, ...]) -> list[str] | None:
    """Flatten repeated --acl values, each of which may be a comma-separated list."""
    if not acl:
        return None
    return [entry.strip() for value in acl for entry in value.split(",") if entry.strip()]


def _parse_labels(labels: tuple[str, ...]) -> dict[str, str]:
    result: dict[str, str] = {}
    for label in labels:
        key, sep, value = label.partition("=")
        if not sep or not key:
            raise InputError(f"Invalid label '{label}', expected KEY=VALUE")
        result[key] = value
    return result


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _context(flags: GlobalFlags) -> tuple[str, str]:
    return resolve_project_id(flags), resolve_region(flags)


@click.group(name="mongodbflex")
def mongodbflex_group():
    """Manage MongoDB Flex instances, users and backups."""
    pass


@mongodbflex_group.group(name="instance")
def instance_group():
    """Manage MongoDB Flex instances."""
    pass


_instance_type_choice = click.Choice(available_instance_types())


@instance_group.command(name="create")
@click.option("--name", "instance_name", required=True, help="Instance name")
@click.option(
    "--acl",
    required=True,
    multiple=True,
    help="Allowed IP ranges (CIDR), comma-separated or repeated",
)
@click.option("--flavor-id", help="Flavor ID (mutually exclusive with --cpu/--ram)")
@click.option("--cpu", type=click.IntRange(min=1), help="Number of CPUs")
@click.option("--ram", type=click.IntRange(min=1), help="Amount of RAM in GB")
@click.option(
    "--storage-class",
    default=DEFAULT_STORAGE_CLASS,
    show_default=True,
    help="Storage class",
)
@click.option(
    "--storage-size",
    type=click.IntRange(min=1),
    default=DEFAULT_STORAGE_SIZE,
    show_default=True,
    help="Storage size in GB",
)
@click.option("--version", help="MongoDB version (defaults to the latest available)")
@click.option(
    "--type",
    "instance_type",
    type=_instance_type_choice,
    default=DEFAULT_INSTANCE_TYPE,
    show_default=True,
    help="Instance type",
)
@click.option(
    "--backup-schedule",
    default=DEFAULT_BACKUP_SCHEDULE,
    show_default=True,
    help="Backup schedule (cron expression)",
)
@click.option("--label", "labels", multiple=True, help="Label as KEY=VALUE (repeatable)")
@click.pass_context
def create_instance(
    ctx: click.Context,
    instance_name: str,
    acl: tuple[str, ...],
    flavor_id: str | None,
    cpu: int | None,
    ram: int | None,
    storage_class: str,
    storage_size: int,
    version: str | None,
    instance_type: str,
    backup_schedule: str,
    labels: tuple[str, ...],
) -> None:
    """Create a MongoDB Flex instance.

    \b
    EXAMPLES:
    \b
    # Create an instance with 1 CPU and 4 GB RAM
    $ stackctl mongodbflex instance create --name my-instance --cpu 1 --ram 4 --acl 1.2.3.0/24
    \b
    # Create a single-node instance with a specific flavor
    $ stackctl mongodbflex instance create --name my-instance --flavor-id xxx \\
        --type Single --acl 0.0.0.0/0
    """
    flags = get_global_flags(ctx)
    try:
        check_create_flavor_target(flavor_id, cpu, ram)
        project_id, region = _context(flags)
        data = CreateInstanceInput(
            project_id=project_id,
            region=region,
            instance_name=instance_name,
            acl=_split_acl(acl) or [],
            storage_size=storage_size,
            flavor_id=flavor_id,
            cpu=cpu,
            ram=ram,
            storage_class=storage_class,
            version=version,
            instance_type=instance_type,
            backup_schedule=backup_schedule,
            labels=_parse_labels(labels),
        )
        logger.debug(f"Parsed input: {data}")

        if not flags.assume_yes and not click.confirm(
            f'Are you sure you want to create a MongoDB Flex instance "{instance_name}"?',
            default=False,
        ):
            click.echo("Aborted.")
            return

        client = mongodbflex_client(flags)
        payload = build_create_payload(data, client)

        try:
            instance_id = client.create_instance(project_id, region, payload.to_dict())
        except StackctlError as e:
            raise CollaboratorError("create MongoDB Flex instance", instance_name, e) from e

        if not flags.async_mode:
            try:
                run_with_spinner(
                    create_instance_wait_handler(client, project_id, instance_id, region),
                    "Creating instance",
                )
            except StackctlError as e:
                raise CollaboratorError(
                    "wait for MongoDB Flex instance creation", instance_id, e
                ) from e

        operation_state = "Triggered creation of" if flags.async_mode else "Created"
        click.echo(
            f'{operation_state} instance for project "{project_id}". Instance ID: {instance_id}'
        )
    except StackctlError as e:
        _fail(e)


@instance_group.command(name="update")
@click.argument("instance_id", callback=validate_uuid)
@click.option("--name", "instance_name", help="Instance name")
@click.option(
    "--acl", multiple=True, help="Allowed IP ranges (CIDR), comma-separated or repeated"
)
@click.option("--flavor-id", help="Flavor ID (mutually exclusive with --cpu/--ram)")
@click.option("--cpu", type=click.IntRange(min=1), help="Number of CPUs")
@click.option("--ram", type=click.IntRange(min=1), help="Amount of RAM in GB")
@click.option("--storage-class", help="Storage class")
@click.option("--storage-size", type=click.IntRange(min=1), help="Storage size in GB")
@click.option("--version", help="MongoDB version")
@click.option("--type", "instance_type", type=_instance_type_choice, help="Instance type")
@click.option("--backup-schedule", help="Backup schedule (cron expression)")
@click.pass_context
def update_instance(
    ctx: click.Context,
    instance_id: str,
    instance_name: str | None,
    acl: tuple[str, ...],
    flavor_id: str | None,
    cpu: int | None,
    ram: int | None,
    storage_class: str | None,
    storage_size: int | None,
    version: str | None,
    instance_type: str | None,
    backup_schedule: str | None,
) -> None:
    """Update a MongoDB Flex instance.

    Only the given fields are changed.

    \b
    EXAMPLES:
    \b
    # Change the name of an instance
    $ stackctl mongodbflex instance update xxx --name my-new-name
    \b
    # Move an instance to a flavor with 2 CPUs and 8 GB RAM
    $ stackctl mongodbflex instance update xxx --cpu 2 --ram 8
    """
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        data = UpdateInstanceInput(
            project_id=project_id,
            instance_id=instance_id,
            region=region,
            instance_name=instance_name,
            acl=_split_acl(acl),
            backup_schedule=backup_schedule,
            flavor_id=flavor_id,
            cpu=cpu,
            ram=ram,
            storage_class=storage_class,
            storage_size=storage_size,
            version=version,
            instance_type=instance_type,
        )
        if not data.has_changes():
            raise EmptyUpdateError()
        if flavor_id is not None and (cpu is not None or ram is not None):
            raise AmbiguousFlavorTargetError()
        logger.debug(f"Parsed input: {data}")

        client = mongodbflex_client(flags)
        label = get_label(
            lambda: get_instance_name(client, project_id, instance_id, region), instance_id
        )

        if not flags.assume_yes and not click.confirm(
            f'Are you sure you want to update instance "{label}"?', default=False
        ):
            click.echo("Aborted.")
            return

        payload = build_partial_update_payload(data, client)

        try:
            client.partial_update_instance(project_id, instance_id, region, payload.to_dict())
        except StackctlError as e:
            raise CollaboratorError("update MongoDB Flex instance", instance_id, e) from e

        if not flags.async_mode:
            try:
                run_with_spinner(
                    update_instance_wait_handler(client, project_id, instance_id, region),
                    "Updating instance",
                )
            except StackctlError as e:
                raise CollaboratorError(
                    "wait for MongoDB Flex instance update", instance_id, e
                ) from e

        operation_state = "Triggered update of" if flags.async_mode else "Updated"
        click.echo(f'{operation_state} instance "{label}"')
    except StackctlError as e:
        _fail(e)


@instance_group.command(name="delete")
@click.argument("instance_id", callback=validate_uuid)
@click.pass_context
def delete_instance(ctx: click.Context, instance_id: str) -> None:
    """Delete a MongoDB Flex instance.

    \b
    EXAMPLES:
    \b
    # Delete instance with ID "xxx"
    $ stackctl mongodbflex instance delete xxx
    """
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        client = mongodbflex_client(flags)
        delete_resource(
            flags,
            "instance",
            instance_id,
            resolve_name=lambda: get_instance_name(client, project_id, instance_id, region),
            delete=lambda: client.delete_instance(project_id, instance_id, region),
            wait_handler=lambda: delete_instance_wait_handler(
                client, project_id, instance_id, region
            ),
            prompt_suffix=" (This cannot be undone)",
        )
    except StackctlError as e:
        _fail(e)


@instance_group.command(name="describe")
@click.argument("instance_id", callback=validate_uuid)
@click.pass_context
def describe_instance(ctx: click.Context, instance_id: str) -> None:
    """Show details of a MongoDB Flex instance."""
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        client = mongodbflex_client(flags)
        try:
            instance = client.get_instance(project_id, instance_id, region)
        except StackctlError as e:
            raise CollaboratorError("get MongoDB Flex instance", instance_id, e) from e
    except StackctlError as e:
        _fail(e)
        return

    instance_type = "-"
    if instance.replicas is not None:
        try:
            instance_type = get_instance_type(instance.replicas)
        except StackctlError as e:
            logger.debug(f"Could not determine instance type: {e}")

    flavor = instance.flavor
    storage = instance.storage
    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("ID", instance.id)
    table.add_row("NAME", instance.name or "-")
    table.add_row("STATUS", instance.status or "-")
    table.add_row("TYPE", instance_type)
    table.add_row("REPLICAS", str(instance.replicas) if instance.replicas is not None else "-")
    table.add_row("VERSION", instance.version or "-")
    table.add_row("FLAVOR ID", (flavor.id if flavor else None) or "-")
    table.add_row("CPU", str(flavor.cpu) if flavor and flavor.cpu is not None else "-")
    table.add_row(
        "RAM (GB)", str(flavor.memory) if flavor and flavor.memory is not None else "-"
    )
    table.add_row("STORAGE CLASS", (storage.storage_class if storage else None) or "-")
    table.add_row(
        "STORAGE SIZE (GB)", str(storage.size) if storage and storage.size is not None else "-"
    )
    table.add_row("ACL", ", ".join(instance.acl) or "-")
    table.add_row("BACKUP SCHEDULE", instance.backup_schedule or "-")
    console.print(table)


@instance_group.command(name="list")
@click.pass_context
def list_instances(ctx: click.Context) -> None:
    """List MongoDB Flex instances of the project."""
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        client = mongodbflex_client(flags)
        try:
            instances = client.list_instances(project_id, region)
        except StackctlError as e:
            raise CollaboratorError(
                "list MongoDB Flex instances", f"project {project_id}", e
            ) from e
    except StackctlError as e:
        _fail(e)
        return

    if not instances:
        click.echo(f'No instances found for project "{project_id}"')
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("NAME", style="cyan")
    table.add_column("STATUS", style="green")
    for instance in instances:
        table.add_row(instance.id, instance.name or "-", instance.status or "-")
    console.print(table)


@mongodbflex_group.command(name="options")
@click.option("--flavors", is_flag=True, help="List available flavors")
@click.option("--versions", is_flag=True, help="List available MongoDB versions")
@click.option("--storages", is_flag=True, help="List storage options of a flavor")
@click.option("--flavor-id", help="Flavor to list storage options for (with --storages)")
@click.pass_context
def list_options(
    ctx: click.Context, flavors: bool, versions: bool, storages: bool, flavor_id: str | None
) -> None:
    """List MongoDB Flex options: flavors, versions and storages.

    \b
    EXAMPLES:
    \b
    # List the available flavors
    $ stackctl mongodbflex options --flavors
    \b
    # List storage options for a flavor
    $ stackctl mongodbflex options --storages --flavor-id xxx
    """
    flags = get_global_flags(ctx)
    try:
        if not (flavors or versions or storages):
            raise InputError("Please specify at least one of --flavors, --versions, --storages.")
        if storages and not flavor_id:
            raise InputError("--flavor-id is required with --storages.")
        if flavor_id and not storages:
            raise InputError("--flavor-id can only be used with --storages.")

        project_id, region = _context(flags)
        client = mongodbflex_client(flags)

        if flavors:
            try:
                flavor_list = client.list_flavors(project_id, region)
            except StackctlError as e:
                raise CollaboratorError(
                    "get MongoDB Flex flavors", f"project {project_id}", e
                ) from e
            table = Table(title="Flavors", show_header=True, header_style="bold cyan")
            table.add_column("ID", style="dim")
            table.add_column("CPU")
            table.add_column("RAM (GB)")
            table.add_column("DESCRIPTION")
            for flavor in flavor_list:
                table.add_row(
                    flavor.id or "-",
                    str(flavor.cpu) if flavor.cpu is not None else "-",
                    str(flavor.memory) if flavor.memory is not None else "-",
                    flavor.description or "-",
                )
            console.print(table)

        if versions:
            try:
                version_list = client.list_versions(project_id, region)
            except StackctlError as e:
                raise CollaboratorError("get MongoDB versions", f"project {project_id}", e) from e
            table = Table(title="Versions", show_header=True, header_style="bold cyan")
            table.add_column("VERSION")
            for version in version_list:
                table.add_row(version)
            console.print(table)

        if storages:
            try:
                catalog = client.list_storages(project_id, flavor_id, region)
            except StackctlError as e:
                raise CollaboratorError(
                    "get MongoDB Flex storages", f"flavor {flavor_id}", e
                ) from e
            storage_range = catalog.storage_range
            table = Table(
                title=f"Storages for flavor {flavor_id}",
                show_header=True,
                header_style="bold cyan",
            )
            table.add_column("CLASS")
            table.add_column("MIN SIZE (GB)")
            table.add_column("MAX SIZE (GB)")
            for storage_class in catalog.storage_classes:
                table.add_row(
                    storage_class,
                    str(storage_range.min) if storage_range else "-",
                    str(storage_range.max) if storage_range else "-",
                )
            console.print(table)
    except StackctlError as e:
        _fail(e)


@mongodbflex_group.group(name="user")
def user_group():
    """Manage MongoDB Flex users."""
    pass


@user_group.command(name="delete")
@click.argument("user_id")
@click.option("--instance-id", required=True, callback=validate_uuid, help="Instance ID")
@click.pass_context
def delete_user(ctx: click.Context, user_id: str, instance_id: str) -> None:
    """Delete a MongoDB Flex user.

    \b
    EXAMPLES:
    \b
    # Delete user "xxx" of instance "yyy"
    $ stackctl mongodbflex user delete xxx --instance-id yyy
    """
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        client = mongodbflex_client(flags)
        instance_label = get_label(
            lambda: get_instance_name(client, project_id, instance_id, region), instance_id
        )
        delete_resource(
            flags,
            "user",
            user_id,
            resolve_name=lambda: get_user_name(client, project_id, instance_id, user_id, region),
            delete=lambda: client.delete_user(project_id, instance_id, user_id, region),
            wait_handler=None,
            prompt_suffix=f' (instance "{instance_label}")',
        )
    except StackctlError as e:
        _fail(e)


@mongodbflex_group.group(name="backup")
def backup_group():
    """Manage MongoDB Flex backups."""
    pass


@backup_group.command(name="list")
@click.option("--instance-id", required=True, callback=validate_uuid, help="Instance ID")
@click.option("--limit", type=click.IntRange(min=1), help="Maximum number of entries to list")
@click.pass_context
def list_backups(ctx: click.Context, instance_id: str, limit: int | None) -> None:
    """List backups of an instance with their latest restore status."""
    flags = get_global_flags(ctx)
    try:
        project_id, region = _context(flags)
        client = mongodbflex_client(flags)
        try:
            backups = client.list_backups(project_id, instance_id, region)
        except StackctlError as e:
            raise CollaboratorError("list MongoDB Flex backups", instance_id, e) from e
        try:
            restore_jobs = client.list_restore_jobs(project_id, instance_id, region)
        except StackctlError as e:
            raise CollaboratorError("list MongoDB Flex restore jobs", instance_id, e) from e
    except StackctlError as e:
        _fail(e)
        return

    if not backups:
        label = get_label(
            lambda: get_instance_name(client, project_id, instance_id, region), instance_id
        )
        click.echo(f'No backups found for instance "{label}"')
        return

    if limit is not None:
        backups = backups[:limit]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("CREATED AT")
    table.add_column("EXPIRES AT")
    table.add_column("BACKUP SIZE")
    table.add_column("RESTORE STATUS", style="green")
    for backup in backups:
        table.add_row(
            backup.id,
            backup.start_time or "-",
            backup.end_time or "-",
            str(backup.size) if backup.size is not None else "-",
            get_restore_status(backup.id, restore_jobs),
        )
    console.print(table)
