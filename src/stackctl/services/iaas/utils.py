"""Name and attribute lookups for IaaS resources.

Each get_*_name helper fetches one resource and returns its display name.
A failed fetch raises CollaboratorError; a response without the field
raises ResourceNotFoundError. Callers that only need a label for a prompt
should go through stackctl.labels.get_label, which falls back to the ID.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from stackctl.exceptions import CollaboratorError, ResourceNotFoundError, StackctlError

logger = logging.getLogger(__name__)


class IaaSAPI(Protocol):
    """Subset of IaaSClient the lookups depend on."""

    def get_volume(self, project_id: str, volume_id: str) -> dict[str, Any]: ...

    def get_network(self, project_id: str, network_id: str) -> dict[str, Any]: ...

    def get_network_area(self, organization_id: str, area_id: str) -> dict[str, Any]: ...

    def list_network_area_projects(
        self, organization_id: str, area_id: str
    ) -> dict[str, Any]: ...

    def get_network_area_range(
        self, organization_id: str, area_id: str, network_range_id: str
    ) -> dict[str, Any]: ...

    def get_security_group(self, project_id: str, security_group_id: str) -> dict[str, Any]: ...

    def get_security_group_rule(
        self, project_id: str, security_group_id: str, rule_id: str
    ) -> dict[str, Any]: ...

    def get_server(self, project_id: str, server_id: str) -> dict[str, Any]: ...

    def get_public_ip(self, project_id: str, public_ip_id: str) -> dict[str, Any]: ...

    def get_image(self, project_id: str, image_id: str) -> dict[str, Any]: ...

    def get_affinity_group(self, project_id: str, affinity_group_id: str) -> dict[str, Any]: ...

    def get_backup(self, project_id: str, backup_id: str) -> dict[str, Any]: ...

    def get_snapshot(self, project_id: str, snapshot_id: str) -> dict[str, Any]: ...


def _fetch(
    operation: str, resource_id: str, fetch: Callable[..., Any], *args: str
) -> dict[str, Any]:
    try:
        data = fetch(*args)
    except StackctlError as e:
        raise CollaboratorError(operation, resource_id, e) from e
    if not data:
        raise ResourceNotFoundError(f"{operation} ({resource_id}): empty response")
    return data


def _require(data: dict[str, Any], key: str, kind: str, resource_id: str) -> Any:
    value = data.get(key)
    if value is None:
        raise ResourceNotFoundError(f"{kind} {resource_id} has no {key}")
    return value


def get_volume_name(api_client: IaaSAPI, project_id: str, volume_id: str) -> str:
    data = _fetch("get volume", volume_id, api_client.get_volume, project_id, volume_id)
    return _require(data, "name", "Volume", volume_id)


def get_network_name(api_client: IaaSAPI, project_id: str, network_id: str) -> str:
    data = _fetch("get network", network_id, api_client.get_network, project_id, network_id)
    return _require(data, "name", "Network", network_id)


def get_network_area_name(api_client: IaaSAPI, organization_id: str, area_id: str) -> str:
    data = _fetch(
        "get network area", area_id, api_client.get_network_area, organization_id, area_id
    )
    return _require(data, "name", "Network area", area_id)


def get_security_group_name(
    api_client: IaaSAPI, project_id: str, security_group_id: str
) -> str:
    data = _fetch(
        "get security group",
        security_group_id,
        api_client.get_security_group,
        project_id,
        security_group_id,
    )
    return _require(data, "name", "Security group", security_group_id)


def get_security_group_rule_name(
    api_client: IaaSAPI, project_id: str, security_group_id: str, rule_id: str
) -> str:
    """Rules have no name; they are labelled "<ethertype>, <direction>"."""
    data = _fetch(
        "get security group rule",
        rule_id,
        api_client.get_security_group_rule,
        project_id,
        security_group_id,
        rule_id,
    )
    ethertype = _require(data, "ethertype", "Security group rule", rule_id)
    direction = _require(data, "direction", "Security group rule", rule_id)
    return f"{ethertype}, {direction}"


def get_server_name(api_client: IaaSAPI, project_id: str, server_id: str) -> str:
    data = _fetch("get server", server_id, api_client.get_server, project_id, server_id)
    return _require(data, "name", "Server", server_id)


def get_public_ip(api_client: IaaSAPI, project_id: str, public_ip_id: str) -> tuple[str, str]:
    """Get a public IP address and the network interface it is associated with.

    Returns:
        (ip, associated_resource); associated_resource is "" when unassociated
    """
    data = _fetch(
        "get public IP", public_ip_id, api_client.get_public_ip, project_id, public_ip_id
    )
    ip = _require(data, "ip", "Public IP", public_ip_id)
    return ip, data.get("networkInterface") or ""


def get_image_name(api_client: IaaSAPI, project_id: str, image_id: str) -> str:
    data = _fetch("get image", image_id, api_client.get_image, project_id, image_id)
    return _require(data, "name", "Image", image_id)


def get_affinity_group_name(api_client: IaaSAPI, project_id: str, affinity_group_id: str) -> str:
    data = _fetch(
        "get affinity group",
        affinity_group_id,
        api_client.get_affinity_group,
        project_id,
        affinity_group_id,
    )
    return _require(data, "name", "Affinity group", affinity_group_id)


def get_backup_name(api_client: IaaSAPI, project_id: str, backup_id: str) -> str:
    data = _fetch("get backup", backup_id, api_client.get_backup, project_id, backup_id)
    return _require(data, "name", "Backup", backup_id)


def get_snapshot_name(api_client: IaaSAPI, project_id: str, snapshot_id: str) -> str:
    data = _fetch("get snapshot", snapshot_id, api_client.get_snapshot, project_id, snapshot_id)
    return _require(data, "name", "Snapshot", snapshot_id)


def list_attached_projects(api_client: IaaSAPI, organization_id: str, area_id: str) -> list[str]:
    """IDs of the projects attached to a network area."""
    data = _fetch(
        "list network area projects",
        area_id,
        api_client.list_network_area_projects,
        organization_id,
        area_id,
    )
    return list(_require(data, "items", "Network area", area_id))


def get_network_range_prefix(
    api_client: IaaSAPI, organization_id: str, area_id: str, network_range_id: str
) -> str:
    data = _fetch(
        "get network range",
        network_range_id,
        api_client.get_network_area_range,
        organization_id,
        area_id,
        network_range_id,
    )
    return _require(data, "prefix", "Network range", network_range_id)


def get_route_from_api_response(
    prefix: str, nexthop: str, routes: Sequence[dict[str, Any]] | None
) -> dict[str, Any]:
    """Find the route with the given prefix and next hop in a list response.

    Raises:
        ResourceNotFoundError: If no route matches both
    """
    for route in routes or ():
        if route.get("prefix") == prefix and route.get("nexthop") == nexthop:
            return route
    raise ResourceNotFoundError(f"Route with prefix {prefix} and next hop {nexthop} not found")


def get_network_range_from_api_response(
    prefix: str, network_ranges: Sequence[dict[str, Any]] | None
) -> dict[str, Any]:
    """Find the network range with the given prefix in a list response.

    Raises:
        ResourceNotFoundError: If no range has that prefix
    """
    for network_range in network_ranges or ():
        if network_range.get("prefix") == prefix:
            return network_range
    raise ResourceNotFoundError(f"Network range with prefix {prefix} not found")


__all__ = [
    "IaaSAPI",
    "get_affinity_group_name",
    "get_backup_name",
    "get_image_name",
    "get_network_area_name",
    "get_network_name",
    "get_network_range_from_api_response",
    "get_network_range_prefix",
    "get_public_ip",
    "get_route_from_api_response",
    "get_security_group_name",
    "get_security_group_rule_name",
    "get_server_name",
    "get_snapshot_name",
    "get_volume_name",
    "list_attached_projects",
]
