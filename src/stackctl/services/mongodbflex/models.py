"""Data models for the MongoDB Flex API.

Response models are built with from_dict() and tolerate missing fields
(None), since the API may omit any of them. Payload models emit only the
fields that are set, so a partial update never sends zero values.
"""

from dataclasses import dataclass, field
from typing import Any


def _int_or_none(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


@dataclass(frozen=True)
class Flavor:
    """Compute flavor offered for MongoDB Flex instances."""

    id: str | None
    cpu: int | None
    memory: int | None  # GB
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Flavor":
        return cls(
            id=data.get("id"),
            cpu=_int_or_none(data.get("cpu")),
            memory=_int_or_none(data.get("memory")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class StorageRange:
    """Inclusive storage size range in GB."""

    min: int
    max: int


@dataclass(frozen=True)
class StorageCatalog:
    """Storage options available for one flavor."""

    storage_classes: tuple[str, ...] = ()
    storage_range: StorageRange | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StorageCatalog":
        storage_range = None
        raw_range = data.get("storageRange") or {}
        if raw_range.get("min") is not None and raw_range.get("max") is not None:
            storage_range = StorageRange(min=int(raw_range["min"]), max=int(raw_range["max"]))
        return cls(
            storage_classes=tuple(data.get("storageClasses") or ()),
            storage_range=storage_range,
        )


@dataclass(frozen=True)
class Storage:
    storage_class: str | None = None
    size: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Storage":
        return cls(storage_class=data.get("class"), size=_int_or_none(data.get("size")))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.storage_class is not None:
            result["class"] = self.storage_class
        if self.size is not None:
            result["size"] = self.size
        return result


@dataclass(frozen=True)
class Instance:
    """MongoDB Flex instance as returned by the get/list endpoints."""

    id: str
    name: str | None = None
    status: str | None = None
    flavor: Flavor | None = None
    storage: Storage | None = None
    replicas: int | None = None
    version: str | None = None
    acl: tuple[str, ...] = ()
    backup_schedule: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Instance":
        flavor = data.get("flavor")
        storage = data.get("storage")
        acl = (data.get("acl") or {}).get("items") or ()
        return cls(
            id=data.get("id", ""),
            name=data.get("name"),
            status=data.get("status"),
            flavor=Flavor.from_dict(flavor) if flavor else None,
            storage=Storage.from_dict(storage) if storage else None,
            replicas=_int_or_none(data.get("replicas")),
            version=data.get("version"),
            acl=tuple(acl),
            backup_schedule=data.get("backupSchedule"),
        )


@dataclass(frozen=True)
class User:
    id: str
    username: str | None = None
    database: str | None = None
    roles: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data.get("id", ""),
            username=data.get("username"),
            database=data.get("database"),
            roles=tuple(data.get("roles") or ()),
        )


@dataclass(frozen=True)
class Backup:
    id: str
    name: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    size: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Backup":
        return cls(
            id=data.get("id", ""),
            name=data.get("name"),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
            size=_int_or_none(data.get("size")),
        )


@dataclass(frozen=True)
class RestoreJob:
    backup_id: str | None
    status: str | None
    date: str | None  # ISO-8601, sorts chronologically as a string

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RestoreJob":
        return cls(
            backup_id=data.get("backupID"),
            status=data.get("status"),
            date=data.get("date"),
        )


@dataclass
class PartialUpdateInstancePayload:
    """Sparse patch for an instance; unset fields are left out entirely."""

    name: str | None = None
    acl: list[str] | None = None
    backup_schedule: str | None = None
    flavor_id: str | None = None
    replicas: int | None = None
    storage: Storage | None = None
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.name is not None:
            result["name"] = self.name
        if self.acl is not None:
            result["acl"] = {"items": list(self.acl)}
        if self.backup_schedule is not None:
            result["backupSchedule"] = self.backup_schedule
        if self.flavor_id is not None:
            result["flavorId"] = self.flavor_id
        if self.replicas is not None:
            result["replicas"] = self.replicas
        if self.storage is not None:
            result["storage"] = self.storage.to_dict()
        if self.version is not None:
            result["version"] = self.version
        return result

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class CreateInstancePayload:
    name: str
    flavor_id: str
    storage: Storage
    replicas: int
    version: str
    backup_schedule: str
    acl: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "acl": {"items": list(self.acl)},
            "backupSchedule": self.backup_schedule,
            "flavorId": self.flavor_id,
            "replicas": self.replicas,
            "storage": self.storage.to_dict(),
            "version": self.version,
            "labels": dict(self.labels),
        }


__all__ = [
    "Backup",
    "CreateInstancePayload",
    "Flavor",
    "Instance",
    "PartialUpdateInstancePayload",
    "RestoreJob",
    "Storage",
    "StorageCatalog",
    "StorageRange",
    "User",
]
