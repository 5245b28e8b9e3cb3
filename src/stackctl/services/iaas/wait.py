"""Wait handlers for IaaS delete operations.

A resource counts as deleted once its fetch answers 404 or reports status
DELETED.
"""

import logging
from collections.abc import Callable
from typing import Any

from stackctl.exceptions import APIError, WaitError
from stackctl.wait import WaitHandler

logger = logging.getLogger(__name__)

STATUS_DELETED = "DELETED"
STATUS_ERROR = "ERROR"


def _delete_wait_handler(
    kind: str, fetch: Callable[[], dict[str, Any]], resource_id: str
) -> WaitHandler[dict[str, Any]]:
    def check() -> tuple[bool, dict[str, Any] | None]:
        try:
            data = fetch()
        except APIError as e:
            if e.is_not_found:
                return True, None
            raise
        status = (data or {}).get("status")
        logger.debug(f"{kind} {resource_id} status: {status}")
        if status == STATUS_DELETED:
            return True, data
        if status == STATUS_ERROR:
            raise WaitError(f"Deletion of {kind} {resource_id} failed")
        return False, None

    return WaitHandler(check, description=f"deletion of {kind} {resource_id}")


def delete_volume_wait_handler(api_client, project_id: str, volume_id: str):
    return _delete_wait_handler(
        "volume", lambda: api_client.get_volume(project_id, volume_id), volume_id
    )


def delete_network_wait_handler(api_client, project_id: str, network_id: str):
    return _delete_wait_handler(
        "network", lambda: api_client.get_network(project_id, network_id), network_id
    )


def delete_security_group_wait_handler(api_client, project_id: str, security_group_id: str):
    return _delete_wait_handler(
        "security group",
        lambda: api_client.get_security_group(project_id, security_group_id),
        security_group_id,
    )


def delete_server_wait_handler(api_client, project_id: str, server_id: str):
    return _delete_wait_handler(
        "server", lambda: api_client.get_server(project_id, server_id), server_id
    )


__all__ = [
    "delete_network_wait_handler",
    "delete_security_group_wait_handler",
    "delete_server_wait_handler",
    "delete_volume_wait_handler",
]
