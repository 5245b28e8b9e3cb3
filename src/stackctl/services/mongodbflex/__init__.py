"""MongoDB Flex managed database service."""

from stackctl.services.mongodbflex.client import SERVICE_NAME, MongoDBFlexClient

__all__ = ["SERVICE_NAME", "MongoDBFlexClient"]
