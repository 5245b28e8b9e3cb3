"""Exception hierarchy for stackctl.

Every error raised by stackctl derives from StackctlError so the CLI layer can
turn it into a single "Error: ..." line and a non-zero exit code.

Validation errors (flavor, storage, instance type, version) are terminal for
the current command. CollaboratorError wraps a failed API fetch with the name
of the fetch and the resource it was made for.
"""


class StackctlError(Exception):
    """Base exception for all stackctl errors."""

    pass


class InputError(StackctlError):
    """Invalid combination of command-line arguments or flags."""

    pass


class ProjectIdError(InputError):
    """No project ID was given on the command line or in the config."""

    def __init__(self) -> None:
        super().__init__(
            "Project ID is not set.\n"
            "Pass it with --project-id or persist it with:\n"
            "  $ stackctl config set --project-id <PROJECT_ID>"
        )


class EmptyUpdateError(InputError):
    """An update command was invoked without any field to change."""

    def __init__(self) -> None:
        super().__init__("Please specify at least one field to update.")


class AmbiguousFlavorTargetError(InputError):
    """Both a flavor ID and a CPU/RAM combination were requested."""

    def __init__(self) -> None:
        super().__init__(
            "Flavor ID and CPU/RAM are mutually exclusive. "
            "Provide either --flavor-id or --cpu and --ram."
        )


class ConfigError(StackctlError):
    """Raised when configuration operations fail."""

    pass


class InvalidInstanceTypeError(StackctlError):
    """Instance type name is not one of the known topologies."""

    def __init__(self, instance_type: str, available: list[str]) -> None:
        self.instance_type = instance_type
        self.available = available
        super().__init__(
            f"Invalid instance type: '{instance_type}'. "
            f"Valid types: {', '.join(available)}"
        )


class InvalidReplicaCountError(StackctlError):
    """No instance type requires the given number of replicas."""

    def __init__(self, replicas: int) -> None:
        self.replicas = replicas
        super().__init__(f"Invalid number of replicas: {replicas}")


class InvalidFlavorError(StackctlError):
    """Requested flavor does not exist in the service's flavor catalog."""

    def __init__(
        self,
        service: str,
        details: str,
        flavor_id: str | None = None,
        available: list[tuple[int, int]] | None = None,
    ) -> None:
        self.service = service
        self.details = details
        self.flavor_id = flavor_id
        self.available = available or []
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        lines = ["The provided flavor is invalid.", self.details]
        if self.available:
            lines.append("Available CPU/RAM combinations:")
            lines.extend(f"- {cpu} CPU, {ram} GB RAM" for cpu, ram in self.available)
        lines.append(
            "Either provide a valid flavor ID or a valid CPU/RAM combination, "
            "get them by running:"
        )
        lines.append(f"  $ stackctl {self.service} options --flavors")
        return "\n".join(lines)


class InvalidStorageError(StackctlError):
    """Requested storage class or size is not allowed for the flavor."""

    def __init__(self, service: str, details: str, flavor_id: str | None = None) -> None:
        self.service = service
        self.details = details
        self.flavor_id = flavor_id
        message = f"The provided storage configuration is invalid.\n{details}"
        if flavor_id:
            message += (
                f"\nYou can get the available storage options for flavor {flavor_id} "
                f"by running:\n  $ stackctl {service} options --storages --flavor-id {flavor_id}"
            )
        super().__init__(message)


class MissingCatalogError(StackctlError):
    """A catalog needed for validation could not be obtained.

    Distinct from the validation errors: the user input may be fine, the data
    to check it against is missing.
    """

    pass


class NoVersionsAvailableError(StackctlError):
    """The version list is empty or holds no parseable version."""

    pass


class ResourceNotFoundError(StackctlError):
    """A resource or one of its required fields is missing from a response."""

    pass


class CollaboratorError(StackctlError):
    """An API fetch failed while resolving or validating input."""

    def __init__(self, operation: str, resource: str, cause: Exception) -> None:
        self.operation = operation
        self.resource = resource
        self.cause = cause
        super().__init__(f"{operation} ({resource}): {cause}")


class APIError(StackctlError):
    """HTTP request to a platform API failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class WaitError(StackctlError):
    """Asynchronous operation reached a failure state."""

    pass


class WaitTimeoutError(WaitError):
    """Asynchronous operation did not finish before the deadline."""

    pass


__all__ = [
    "APIError",
    "AmbiguousFlavorTargetError",
    "CollaboratorError",
    "ConfigError",
    "EmptyUpdateError",
    "InputError",
    "InvalidFlavorError",
    "InvalidInstanceTypeError",
    "InvalidReplicaCountError",
    "InvalidStorageError",
    "MissingCatalogError",
    "NoVersionsAvailableError",
    "ProjectIdError",
    "ResourceNotFoundError",
    "StackctlError",
    "WaitError",
    "WaitTimeoutError",
]
