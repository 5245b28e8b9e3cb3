"""Command groups for the stackctl CLI."""

from stackctl.commands.config import config_group
from stackctl.commands.mongodbflex import mongodbflex_group
from stackctl.commands.network import network_group
from stackctl.commands.security_group import security_group_group
from stackctl.commands.server import server_group
from stackctl.commands.volume import volume_group

__all__ = [
    "config_group",
    "mongodbflex_group",
    "network_group",
    "security_group_group",
    "server_group",
    "volume_group",
]
