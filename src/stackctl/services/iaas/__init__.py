"""IaaS compute, network and storage service."""

from stackctl.services.iaas.client import SERVICE_NAME, IaaSClient

__all__ = ["SERVICE_NAME", "IaaSClient"]
