"""Flavor, storage and version resolution for MongoDB Flex.

Public API:
    available_instance_types: Sorted instance type names
    get_instance_replicas: Instance type -> replica count
    get_instance_type: Replica count -> instance type
    validate_flavor_id: Check a flavor ID against the flavor catalog
    load_flavor_id: Resolve a CPU/RAM pair to a flavor ID
    validate_storage: Check storage class/size against the storage catalog
    select_latest_version: Highest semantic version of a version list
    get_latest_mongodb_version: Fetch versions and select the latest
    get_instance_name / get_user_name: Strict label lookups
    get_restore_status: Status of the latest restore job of a backup

All checks are exact: no closest-fit flavor, no silent fallback. Catalogs
are fetched by the caller and passed in; a missing catalog is reported as
MissingCatalogError, never as a validation failure.
"""

import logging
from collections.abc import Sequence
from types import MappingProxyType
from typing import Protocol

import semantic_version

from stackctl.exceptions import (
    CollaboratorError,
    InvalidFlavorError,
    InvalidInstanceTypeError,
    InvalidReplicaCountError,
    InvalidStorageError,
    MissingCatalogError,
    NoVersionsAvailableError,
    ResourceNotFoundError,
    StackctlError,
)
from stackctl.services.mongodbflex.client import SERVICE_NAME
from stackctl.services.mongodbflex.models import (
    Flavor,
    Instance,
    RestoreJob,
    StorageCatalog,
    User,
)

logger = logging.getLogger(__name__)

# The number of replicas is enforced by the API according to the instance type
INSTANCE_TYPE_REPLICAS: MappingProxyType[str, int] = MappingProxyType(
    {
        "Single": 1,
        "Replica": 3,
        "Sharded": 9,
    }
)


class MongoDBFlexAPI(Protocol):
    """Subset of MongoDBFlexClient the resolution helpers depend on."""

    def list_flavors(self, project_id: str, region: str) -> list[Flavor]: ...

    def list_storages(self, project_id: str, flavor_id: str, region: str) -> StorageCatalog: ...

    def list_versions(self, project_id: str, region: str) -> list[str]: ...

    def get_instance(self, project_id: str, instance_id: str, region: str) -> Instance: ...

    def get_user(
        self, project_id: str, instance_id: str, user_id: str, region: str
    ) -> User: ...


def available_instance_types() -> list[str]:
    """Instance type names in lexicographic order."""
    return sorted(INSTANCE_TYPE_REPLICAS)


def get_instance_replicas(instance_type: str) -> int:
    """Get the replica count required by an instance type.

    Raises:
        InvalidInstanceTypeError: If the type is unknown
    """
    try:
        return INSTANCE_TYPE_REPLICAS[instance_type]
    except KeyError:
        raise InvalidInstanceTypeError(instance_type, available_instance_types()) from None


def get_instance_type(replicas: int) -> str:
    """Get the instance type that requires exactly `replicas` replicas.

    Raises:
        InvalidReplicaCountError: If no type matches
    """
    for instance_type, count in INSTANCE_TYPE_REPLICAS.items():
        if count == replicas:
            return instance_type
    raise InvalidReplicaCountError(replicas)


def validate_flavor_id(flavor_id: str, flavors: Sequence[Flavor] | None) -> None:
    """Check that the flavor ID exists in the catalog (case-insensitive).

    Raises:
        MissingCatalogError: If no catalog was given
        InvalidFlavorError: If no flavor has that ID
    """
    if flavors is None:
        raise MissingCatalogError("Flavor catalog is not available")

    wanted = flavor_id.casefold()
    for flavor in flavors:
        if flavor.id is not None and flavor.id.casefold() == wanted:
            return

    raise InvalidFlavorError(
        service=SERVICE_NAME,
        details=f"You provided flavor ID '{flavor_id}', which is invalid.",
        flavor_id=flavor_id,
    )


def load_flavor_id(cpu: int, ram: int, flavors: Sequence[Flavor] | None) -> str:
    """Resolve a CPU/RAM combination to the ID of the first exactly matching flavor.

    Catalog entries missing an ID, CPU or memory value are skipped.

    Args:
        cpu: Number of CPU cores
        ram: Memory in GB
        flavors: Flavor catalog

    Returns:
        Flavor ID

    Raises:
        MissingCatalogError: If no catalog was given
        InvalidFlavorError: If no flavor matches; lists every available combination
    """
    if flavors is None:
        raise MissingCatalogError("Flavor catalog is not available")

    for flavor in flavors:
        if flavor.id is None or flavor.cpu is None or flavor.memory is None:
            continue
        if flavor.cpu == cpu and flavor.memory == ram:
            return flavor.id

    available = [
        (f.cpu, f.memory)
        for f in flavors
        if f.id is not None and f.cpu is not None and f.memory is not None
    ]
    raise InvalidFlavorError(
        service=SERVICE_NAME,
        details=(
            f"You provided an invalid combination for CPU and RAM "
            f"({cpu} CPU, {ram} GB RAM)."
        ),
        available=available,
    )


def validate_storage(
    storage_class: str | None,
    storage_size: int | None,
    storages: StorageCatalog | None,
    flavor_id: str,
) -> None:
    """Validate a storage class and size against a flavor's storage catalog.

    The size must lie in the inclusive range; the class must match one of
    the allowed classes case-insensitively. Either may be omitted.

    Raises:
        MissingCatalogError: If the catalog (or its size range, when a size is
            requested) is not available
        InvalidStorageError: If the size is out of range or the class unknown
    """
    if storages is None:
        raise MissingCatalogError(f"Storage catalog for flavor {flavor_id} is not available")

    if storage_size is not None:
        storage_range = storages.storage_range
        if storage_range is None:
            raise MissingCatalogError(
                f"Storage catalog for flavor {flavor_id} has no size range"
            )
        if storage_size < storage_range.min or storage_size > storage_range.max:
            raise InvalidStorageError(
                service=SERVICE_NAME,
                details=(
                    f"You provided storage size '{storage_size}', which is invalid. "
                    f"The valid range is {storage_range.min}-{storage_range.max}."
                ),
            )

    if storage_class is None:
        return

    wanted = storage_class.casefold()
    if any(sc.casefold() == wanted for sc in storages.storage_classes):
        return

    raise InvalidStorageError(
        service=SERVICE_NAME,
        details=(
            f"You provided storage class '{storage_class}', which is invalid. "
            f"Valid classes: {', '.join(storages.storage_classes) or 'none'}"
        ),
        flavor_id=flavor_id,
    )


def _parse_version(version: str) -> semantic_version.Version | None:
    # coerce() would fold a fourth component into build metadata
    core = version.split("-", 1)[0].split("+", 1)[0]
    if core.count(".") > 2:
        logger.debug(f"Ignoring version with more than three components: {version!r}")
        return None
    try:
        return semantic_version.Version.coerce(version)
    except ValueError:
        logger.debug(f"Ignoring unparseable version: {version!r}")
        return None


def select_latest_version(versions: Sequence[str]) -> str:
    """Select the highest version under semantic-version ordering.

    Partial versions such as "5.0" are accepted, so "10.0" ranks above "9.0".
    Versions with more than three numeric components are ignored.
    Equal versions keep the first one seen.

    Raises:
        NoVersionsAvailableError: If no parseable version is given
    """
    latest: str | None = None
    latest_parsed: semantic_version.Version | None = None

    for version in versions:
        parsed = _parse_version(version)
        if parsed is None:
            continue
        if latest_parsed is None or parsed > latest_parsed:
            latest, latest_parsed = version, parsed

    if latest is None:
        raise NoVersionsAvailableError("No MongoDB versions found")
    return latest


def get_latest_mongodb_version(api_client: MongoDBFlexAPI, project_id: str, region: str) -> str:
    try:
        versions = api_client.list_versions(project_id, region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB versions", f"project {project_id}", e) from e
    return select_latest_version(versions)


def get_instance_name(
    api_client: MongoDBFlexAPI, project_id: str, instance_id: str, region: str
) -> str:
    try:
        instance = api_client.get_instance(project_id, instance_id, region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB Flex instance", instance_id, e) from e
    if not instance.name:
        raise ResourceNotFoundError(f"MongoDB Flex instance {instance_id} has no name")
    return instance.name


def get_user_name(
    api_client: MongoDBFlexAPI, project_id: str, instance_id: str, user_id: str, region: str
) -> str:
    try:
        user = api_client.get_user(project_id, instance_id, user_id, region)
    except StackctlError as e:
        raise CollaboratorError("get MongoDB Flex user", user_id, e) from e
    if not user.username:
        raise ResourceNotFoundError(f"MongoDB Flex user {user_id} has no username")
    return user.username


def get_restore_status(backup_id: str, restore_jobs: Sequence[RestoreJob] | None) -> str:
    """Status of the most recent restore job for a backup, "-" if there is none."""
    if restore_jobs is None:
        return "-"

    newest_first = sorted(restore_jobs, key=lambda job: job.date or "", reverse=True)
    for job in newest_first:
        if job.backup_id == backup_id:
            return job.status or "-"
    return "-"


__all__ = [
    "INSTANCE_TYPE_REPLICAS",
    "MongoDBFlexAPI",
    "available_instance_types",
    "get_instance_name",
    "get_instance_replicas",
    "get_instance_type",
    "get_latest_mongodb_version",
    "get_restore_status",
    "get_user_name",
    "load_flavor_id",
    "select_latest_version",
    "validate_flavor_id",
    "validate_storage",
]
