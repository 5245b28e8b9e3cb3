"""Wait handlers for MongoDB Flex instance operations."""

import logging

from stackctl.exceptions import APIError, WaitError
from stackctl.services.mongodbflex.models import Instance
from stackctl.services.mongodbflex.utils import MongoDBFlexAPI
from stackctl.wait import WaitHandler

logger = logging.getLogger(__name__)

INSTANCE_STATUS_READY = "READY"
INSTANCE_STATUS_FAILED = "FAILED"


def _ready_check(api_client: MongoDBFlexAPI, project_id: str, instance_id: str, region: str):
    def check() -> tuple[bool, Instance | None]:
        instance = api_client.get_instance(project_id, instance_id, region)
        logger.debug(f"Instance {instance_id} status: {instance.status}")
        if instance.status == INSTANCE_STATUS_READY:
            return True, instance
        if instance.status == INSTANCE_STATUS_FAILED:
            raise WaitError(f"MongoDB Flex instance {instance_id} reached status FAILED")
        return False, None

    return check


def create_instance_wait_handler(
    api_client: MongoDBFlexAPI, project_id: str, instance_id: str, region: str
) -> WaitHandler[Instance]:
    return WaitHandler(
        _ready_check(api_client, project_id, instance_id, region),
        description=f"creation of MongoDB Flex instance {instance_id}",
    )


def update_instance_wait_handler(
    api_client: MongoDBFlexAPI, project_id: str, instance_id: str, region: str
) -> WaitHandler[Instance]:
    return WaitHandler(
        _ready_check(api_client, project_id, instance_id, region),
        description=f"update of MongoDB Flex instance {instance_id}",
    )


def delete_instance_wait_handler(
    api_client: MongoDBFlexAPI, project_id: str, instance_id: str, region: str
) -> WaitHandler[Instance]:
    """Wait until the instance fetch answers 404."""

    def check() -> tuple[bool, Instance | None]:
        try:
            instance = api_client.get_instance(project_id, instance_id, region)
        except APIError as e:
            if e.is_not_found:
                return True, None
            raise
        if instance.status == INSTANCE_STATUS_FAILED:
            raise WaitError(f"Deletion of MongoDB Flex instance {instance_id} failed")
        return False, None

    return WaitHandler(check, description=f"deletion of MongoDB Flex instance {instance_id}")


__all__ = [
    "create_instance_wait_handler",
    "delete_instance_wait_handler",
    "update_instance_wait_handler",
]
