"""IaaS API client.

Project-scoped resources live under /v1/projects/{projectId}; network areas
are scoped to the organization under /v1/organizations/{organizationId}.
Responses are returned as decoded JSON dicts.
"""

import logging
from typing import Any

from stackctl.api_client import APIClient

logger = logging.getLogger(__name__)

SERVICE_NAME = "iaas"


class IaaSClient(APIClient):
    """Client for the IaaS service."""

    DEFAULT_ENDPOINT = "https://iaas.api.stackit.cloud"

    @staticmethod
    def _project(project_id: str) -> str:
        return f"/v1/projects/{project_id}"

    @staticmethod
    def _organization(organization_id: str) -> str:
        return f"/v1/organizations/{organization_id}"

    def _get_dict(self, path: str) -> dict[str, Any]:
        return self.get(path) or {}

    # Volumes

    def get_volume(self, project_id: str, volume_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/volumes/{volume_id}")

    def delete_volume(self, project_id: str, volume_id: str) -> None:
        self.delete(f"{self._project(project_id)}/volumes/{volume_id}")

    # Networks

    def get_network(self, project_id: str, network_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/networks/{network_id}")

    def delete_network(self, project_id: str, network_id: str) -> None:
        self.delete(f"{self._project(project_id)}/networks/{network_id}")

    # Network areas

    def get_network_area(self, organization_id: str, area_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._organization(organization_id)}/network-areas/{area_id}")

    def list_network_area_projects(self, organization_id: str, area_id: str) -> dict[str, Any]:
        path = f"{self._organization(organization_id)}/network-areas/{area_id}/projects"
        return self._get_dict(path)

    def get_network_area_range(
        self, organization_id: str, area_id: str, network_range_id: str
    ) -> dict[str, Any]:
        path = (
            f"{self._organization(organization_id)}/network-areas/{area_id}"
            f"/network-ranges/{network_range_id}"
        )
        return self._get_dict(path)

    # Security groups

    def get_security_group(self, project_id: str, security_group_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/security-groups/{security_group_id}")

    def delete_security_group(self, project_id: str, security_group_id: str) -> None:
        self.delete(f"{self._project(project_id)}/security-groups/{security_group_id}")

    def get_security_group_rule(
        self, project_id: str, security_group_id: str, rule_id: str
    ) -> dict[str, Any]:
        path = f"{self._project(project_id)}/security-groups/{security_group_id}/rules/{rule_id}"
        return self._get_dict(path)

    # Servers

    def get_server(self, project_id: str, server_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/servers/{server_id}")

    def delete_server(self, project_id: str, server_id: str) -> None:
        self.delete(f"{self._project(project_id)}/servers/{server_id}")

    # Other lookups

    def get_public_ip(self, project_id: str, public_ip_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/public-ips/{public_ip_id}")

    def get_image(self, project_id: str, image_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/images/{image_id}")

    def get_affinity_group(self, project_id: str, affinity_group_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/affinity-groups/{affinity_group_id}")

    def get_backup(self, project_id: str, backup_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/backups/{backup_id}")

    def get_snapshot(self, project_id: str, snapshot_id: str) -> dict[str, Any]:
        return self._get_dict(f"{self._project(project_id)}/snapshots/{snapshot_id}")


__all__ = ["SERVICE_NAME", "IaaSClient"]
