"""stackctl - command-line client for the cloud platform

Philosophy:
- Thin commands: parse flags, call one API operation, print the result
- Strict validation of flavors, storage and versions before any write
- Labels for prompts are best effort, validation never is

Manages MongoDB Flex database instances and IaaS resources (volumes,
networks, security groups, servers) from the terminal.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
