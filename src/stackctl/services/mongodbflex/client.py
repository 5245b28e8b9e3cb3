"""MongoDB Flex API client.

Regional REST API rooted at /v2/projects/{projectId}/regions/{region}. Each
method issues exactly one request and converts the response into the models
from stackctl.services.mongodbflex.models.
"""

import logging
from typing import Any

from stackctl.api_client import APIClient
from stackctl.services.mongodbflex.models import (
    Backup,
    Flavor,
    Instance,
    RestoreJob,
    StorageCatalog,
    User,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "mongodbflex"


class MongoDBFlexClient(APIClient):
    """Client for the MongoDB Flex service."""

    DEFAULT_ENDPOINT = "https://mongodb-flex-service.api.stackit.cloud"

    @staticmethod
    def _base(project_id: str, region: str) -> str:
        return f"/v2/projects/{project_id}/regions/{region}"

    def list_flavors(self, project_id: str, region: str) -> list[Flavor]:
        data = self.get(f"{self._base(project_id, region)}/flavors") or {}
        return [Flavor.from_dict(f) for f in data.get("flavors") or []]

    def list_storages(self, project_id: str, flavor_id: str, region: str) -> StorageCatalog:
        data = self.get(f"{self._base(project_id, region)}/storages/{flavor_id}") or {}
        return StorageCatalog.from_dict(data)

    def list_versions(self, project_id: str, region: str) -> list[str]:
        data = self.get(f"{self._base(project_id, region)}/versions") or {}
        return list(data.get("versions") or [])

    def list_instances(self, project_id: str, region: str) -> list[Instance]:
        data = self.get(f"{self._base(project_id, region)}/instances") or {}
        return [Instance.from_dict(i) for i in data.get("items") or []]

    def get_instance(self, project_id: str, instance_id: str, region: str) -> Instance:
        data = self.get(f"{self._base(project_id, region)}/instances/{instance_id}") or {}
        return Instance.from_dict(data.get("item") or {"id": instance_id})

    def create_instance(self, project_id: str, region: str, payload: dict[str, Any]) -> str:
        """Create an instance and return its ID."""
        data = self.post(f"{self._base(project_id, region)}/instances", json=payload) or {}
        return str(data.get("id", ""))

    def partial_update_instance(
        self, project_id: str, instance_id: str, region: str, payload: dict[str, Any]
    ) -> Instance | None:
        data = self.patch(
            f"{self._base(project_id, region)}/instances/{instance_id}", json=payload
        )
        if data and data.get("item"):
            return Instance.from_dict(data["item"])
        return None

    def delete_instance(self, project_id: str, instance_id: str, region: str) -> None:
        self.delete(f"{self._base(project_id, region)}/instances/{instance_id}")

    def get_user(self, project_id: str, instance_id: str, user_id: str, region: str) -> User:
        path = f"{self._base(project_id, region)}/instances/{instance_id}/users/{user_id}"
        data = self.get(path) or {}
        return User.from_dict(data.get("item") or {"id": user_id})

    def delete_user(self, project_id: str, instance_id: str, user_id: str, region: str) -> None:
        self.delete(f"{self._base(project_id, region)}/instances/{instance_id}/users/{user_id}")

    def list_backups(self, project_id: str, instance_id: str, region: str) -> list[Backup]:
        data = self.get(f"{self._base(project_id, region)}/instances/{instance_id}/backups") or {}
        return [Backup.from_dict(b) for b in data.get("items") or []]

    def list_restore_jobs(
        self, project_id: str, instance_id: str, region: str
    ) -> list[RestoreJob] | None:
        """List restore jobs; None when the response carries no items at all."""
        data = self.get(f"{self._base(project_id, region)}/instances/{instance_id}/restores") or {}
        items = data.get("items")
        if items is None:
            return None
        return [RestoreJob.from_dict(r) for r in items]


__all__ = ["SERVICE_NAME", "MongoDBFlexClient"]
