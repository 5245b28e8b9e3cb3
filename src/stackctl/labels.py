"""Human-readable labels for confirmation prompts and result messages."""

import logging
from collections.abc import Callable

from stackctl.exceptions import StackctlError

logger = logging.getLogger(__name__)


def get_label(resolver: Callable[[], str], resource_id: str) -> str:
    """Resolve a display label, falling back to the resource ID.

    Only for display: a failed lookup must never stop a command.

    Args:
        resolver: Zero-argument callable returning the resource's name
        resource_id: ID used when the lookup fails

    Returns:
        The resolved name, or resource_id
    """
    try:
        label = resolver()
    except StackctlError as e:
        logger.debug(f"Could not get label for {resource_id}: {e}")
        return resource_id
    return label or resource_id


__all__ = ["get_label"]
