"""Request builders for MongoDB Flex instance create and update.

Both builders turn sparse user input into an API payload, resolving and
validating flavor, storage, instance type and version on the way. They run
in a single pass: the first failing fetch or validation aborts the build and
no payload is returned. Fetch failures are wrapped in CollaboratorError.
"""

import logging
from dataclasses import dataclass, field

from stackctl.exceptions import (
    AmbiguousFlavorTargetError,
    CollaboratorError,
    InputError,
    MissingCatalogError,
    StackctlError,
)
from stackctl.services.mongodbflex.models import (
    CreateInstancePayload,
    Flavor,
    Instance,
    PartialUpdateInstancePayload,
    Storage,
)
from stackctl.services.mongodbflex.utils import (
    MongoDBFlexAPI,
    get_instance_replicas,
    get_latest_mongodb_version,
    load_flavor_id,
    validate_flavor_id,
    validate_storage,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_CLASS = "premium-perf2-mongodb"
DEFAULT_INSTANCE_TYPE = "Replica"
DEFAULT_BACKUP_SCHEDULE = "0 0/6 * * *"


@dataclass
class UpdateInstanceInput:
    """What the user asked to change on an existing instance."""

    project_id: str
    instance_id: str
    region: str
    instance_name: str | None = None
    acl: list[str] | None = None
    backup_schedule: str | None = None
    flavor_id: str | None = None
    cpu: int | None = None
    ram: int | None = None
    storage_class: str | None = None
    storage_size: int | None = None
    version: str | None = None
    instance_type: str | None = None

    def has_changes(self) -> bool:
        return any(
            value is not None
            for value in (
                self.instance_name,
                self.acl,
                self.backup_schedule,
                self.flavor_id,
                self.cpu,
                self.ram,
                self.storage_class,
                self.storage_size,
                self.version,
                self.instance_type,
            )
        )


@dataclass
class CreateInstanceInput:
    project_id: str
    region: str
    instance_name: str
    acl: list[str]
    storage_size: int
    flavor_id: str | None = None
    cpu: int | None = None
    ram: int | None = None
    storage_class: str = DEFAULT_STORAGE_CLASS
    version: str | None = None
    instance_type: str = DEFAULT_INSTANCE_TYPE
    backup_schedule: str = DEFAULT_BACKUP_SCHEDULE
    labels: dict[str, str] = field(default_factory=dict)


def check_create_flavor_target(flavor_id: str | None, cpu: int | None, ram: int | None) -> None:
    """Require exactly one way of picking the flavor of a new instance."""
    if flavor_id is not None and (cpu is not None or ram is not None):
        raise AmbiguousFlavorTargetError()
    if flavor_id is None and (cpu is None or ram is None):
        raise InputError("Either --flavor-id or both --cpu and --ram must be provided.")


def _list_flavors(api_client: MongoDBFlexAPI, project_id: str, region: str) -> list[Flavor]:
    try:
        return api_client.list_flavors(project_id, region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB Flex flavors", f"project {project_id}", e) from e


def _get_instance(api_client: MongoDBFlexAPI, data: UpdateInstanceInput) -> Instance:
    try:
        return api_client.get_instance(data.project_id, data.instance_id, data.region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB Flex instance", data.instance_id, e) from e


def _validate_storage_for_flavor(
    api_client: MongoDBFlexAPI,
    project_id: str,
    region: str,
    flavor_id: str,
    storage_class: str | None,
    storage_size: int | None,
) -> None:
    try:
        storages = api_client.list_storages(project_id, flavor_id, region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB Flex storages", f"flavor {flavor_id}", e) from e
    validate_storage(storage_class, storage_size, storages, flavor_id)


def build_partial_update_payload(
    data: UpdateInstanceInput, api_client: MongoDBFlexAPI
) -> PartialUpdateInstancePayload:
    """Build a sparse update payload containing only the requested changes.

    Args:
        data: Requested changes
        api_client: MongoDB Flex API collaborator

    Returns:
        Payload whose to_dict() omits every field the user did not set

    Raises:
        AmbiguousFlavorTargetError: Flavor ID given together with CPU or RAM
            (raised before any API call)
        CollaboratorError: A catalog or instance fetch failed
        InvalidFlavorError, InvalidStorageError, InvalidInstanceTypeError,
        MissingCatalogError: Validation failures
    """
    if data.flavor_id is not None and (data.cpu is not None or data.ram is not None):
        raise AmbiguousFlavorTargetError()

    current_instance: Instance | None = None
    flavor_id: str | None = None

    if data.cpu is not None or data.ram is not None:
        cpu, ram = data.cpu, data.ram
        if cpu is None or ram is None:
            current_instance = _get_instance(api_client, data)
            current_flavor = current_instance.flavor
            if current_flavor is None:
                raise MissingCatalogError(
                    f"Instance {data.instance_id} has no flavor to take CPU/RAM from"
                )
            cpu = cpu if cpu is not None else current_flavor.cpu
            ram = ram if ram is not None else current_flavor.memory
            if cpu is None or ram is None:
                raise MissingCatalogError(
                    f"Current flavor of instance {data.instance_id} has no CPU/RAM values"
                )
        flavors = _list_flavors(api_client, data.project_id, data.region)
        flavor_id = load_flavor_id(cpu, ram, flavors)
        logger.debug(f"Resolved {cpu} CPU / {ram} GB RAM to flavor {flavor_id}")
    elif data.flavor_id is not None:
        flavors = _list_flavors(api_client, data.project_id, data.region)
        validate_flavor_id(data.flavor_id, flavors)
        flavor_id = data.flavor_id

    storage: Storage | None = None
    if data.storage_class is not None or data.storage_size is not None:
        validation_flavor_id = flavor_id
        if validation_flavor_id is None:
            if current_instance is None:
                current_instance = _get_instance(api_client, data)
            if current_instance.flavor is None or current_instance.flavor.id is None:
                raise MissingCatalogError(
                    f"Instance {data.instance_id} has no flavor to validate storage against"
                )
            validation_flavor_id = current_instance.flavor.id
        _validate_storage_for_flavor(
            api_client,
            data.project_id,
            data.region,
            validation_flavor_id,
            data.storage_class,
            data.storage_size,
        )
        storage = Storage(storage_class=data.storage_class, size=data.storage_size)

    replicas: int | None = None
    if data.instance_type is not None:
        replicas = get_instance_replicas(data.instance_type)

    return PartialUpdateInstancePayload(
        name=data.instance_name,
        acl=data.acl,
        backup_schedule=data.backup_schedule,
        flavor_id=flavor_id,
        replicas=replicas,
        storage=storage,
        version=data.version,
    )


def build_create_payload(
    data: CreateInstanceInput, api_client: MongoDBFlexAPI
) -> CreateInstancePayload:
    """Build the payload for a new instance.

    Uses the latest available MongoDB version when none is requested.
    """
    check_create_flavor_target(data.flavor_id, data.cpu, data.ram)

    replicas = get_instance_replicas(data.instance_type)

    flavors = _list_flavors(api_client, data.project_id, data.region)
    if data.flavor_id is not None:
        validate_flavor_id(data.flavor_id, flavors)
        flavor_id = data.flavor_id
    else:
        flavor_id = load_flavor_id(data.cpu, data.ram, flavors)

    _validate_storage_for_flavor(
        api_client,
        data.project_id,
        data.region,
        flavor_id,
        data.storage_class,
        data.storage_size,
    )

    version = data.version
    if version is None:
        version = get_latest_mongodb_version(api_client, data.project_id, data.region)
        logger.debug(f"Using latest MongoDB version {version}")

    labels = {"type": data.instance_type}
    labels.update(data.labels)

    return CreateInstancePayload(
        name=data.instance_name,
        flavor_id=flavor_id,
        storage=Storage(storage_class=data.storage_class, size=data.storage_size),
        replicas=replicas,
        version=version,
        backup_schedule=data.backup_schedule,
        acl=list(data.acl),
        labels=labels,
    )


__all__ = [
    "DEFAULT_BACKUP_SCHEDULE",
    "DEFAULT_INSTANCE_TYPE",
    "DEFAULT_STORAGE_CLASS",
    "CreateInstanceInput",
    "UpdateInstanceInput",
    "build_create_payload",
    "build_partial_update_payload",
    "check_create_flavor_target",
]
