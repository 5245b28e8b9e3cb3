"""Configuration management module.

This module handles persistent configuration storage using TOML format.
Stores defaults the commands fall back to when a flag is not given:
project ID, region, custom service endpoints and the request timeout.

Security:
- Config file permissions: 0600 (owner read/write only)
- Config directory permissions: 0700
- Path validation
"""

import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for older Python versions
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

try:
    import tomlkit
except ImportError as e:
    raise ImportError("tomlkit library not available. Install with: pip install tomlkit") from e

from stackctl.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REGION = "eu01"


@dataclass
class StackctlConfig:
    """stackctl configuration data."""

    project_id: str | None = None
    region: str = DEFAULT_REGION
    mongodbflex_custom_endpoint: str | None = None
    iaas_custom_endpoint: str | None = None
    request_timeout: int | None = None  # seconds

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        # Filter out None values as TOML doesn't support them
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StackctlConfig":
        """Create from dictionary."""
        timeout = data.get("request_timeout")
        return cls(
            project_id=data.get("project_id"),
            region=data.get("region", DEFAULT_REGION),
            mongodbflex_custom_endpoint=data.get("mongodbflex_custom_endpoint"),
            iaas_custom_endpoint=data.get("iaas_custom_endpoint"),
            request_timeout=int(timeout) if timeout is not None else None,
        )

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]


class ConfigManager:
    """Manage the stackctl configuration file.

    Configuration is stored at ~/.stackctl/config.toml with secure permissions.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".stackctl"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def _validate_config_path(cls, path: Path) -> Path:
        """Validate configuration file path.

        Args:
            path: Path to validate

        Returns:
            Resolved path

        Raises:
            ConfigError: If path is outside allowed directories
        """
        resolved_path = path.resolve()

        # ~/.stackctl/, the working directory, and the temp dir (pytest tmp_path)
        allowed_dirs = [
            cls.DEFAULT_CONFIG_DIR.resolve(),
            Path.cwd().resolve(),
            Path(tempfile.gettempdir()).resolve(),
        ]

        for allowed_dir in allowed_dirs:
            try:
                resolved_path.relative_to(allowed_dir)
                return resolved_path
            except ValueError:
                continue

        raise ConfigError(
            f"Config path outside allowed directories: {resolved_path}\n"
            f"Allowed directories:\n"
            f"  - {cls.DEFAULT_CONFIG_DIR}\n"
            f"  - {Path.cwd()}"
        )

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Raises:
            ConfigError: If the custom path is outside allowed directories
        """
        if custom_path:
            return cls._validate_config_path(Path(custom_path).expanduser())
        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def ensure_config_dir(cls) -> Path:
        """Ensure config directory exists with secure permissions.

        Raises:
            ConfigError: If directory creation fails
        """
        try:
            cls.DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

            # Set secure permissions (owner only: rwx------)
            os.chmod(cls.DEFAULT_CONFIG_DIR, 0o700)

            logger.debug(f"Config directory ready: {cls.DEFAULT_CONFIG_DIR}")
            return cls.DEFAULT_CONFIG_DIR

        except OSError as e:
            raise ConfigError(f"Failed to create config directory: {e}") from e

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> StackctlConfig:
        """Load configuration from file.

        A missing file yields the defaults.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return StackctlConfig()

        try:
            mode = config_path.stat().st_mode & 0o777
            if mode & 0o077:
                logger.warning(
                    f"Config file has insecure permissions: {oct(mode)}. Fixing to 0600..."
                )
                os.chmod(config_path, 0o600)

            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]

            logger.debug(f"Loaded config from: {config_path}")
            return StackctlConfig.from_dict(data)

        except (OSError, ValueError, TypeError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

    @classmethod
    def save_config(
        cls,
        config: StackctlConfig,
        custom_path: str | None = None,
        remove_keys: tuple[str, ...] = (),
    ) -> None:
        """Save configuration to file.

        Existing comments and formatting are preserved.

        Args:
            config: Configuration to save
            custom_path: Custom config file path (optional)
            remove_keys: Keys to drop from the file

        Raises:
            ConfigError: If saving fails or path is outside allowed directories
        """
        temp_path: Path | None = None
        try:
            if custom_path:
                config_path = cls.get_config_path(custom_path)
                config_path.parent.mkdir(parents=True, exist_ok=True)
            else:
                cls.ensure_config_dir()
                config_path = cls.DEFAULT_CONFIG_FILE

            # Temporary file and atomic rename
            temp_path = config_path.with_suffix(".tmp")

            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()

            for key in remove_keys:
                if key in doc:
                    del doc[key]
            for key, value in config.to_dict().items():
                doc[key] = value

            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)

            os.chmod(temp_path, 0o600)
            temp_path.replace(config_path)

            logger.debug(f"Saved config to: {config_path}")

        except (OSError, ValueError) as e:
            if temp_path and temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

    @classmethod
    def update_config(cls, custom_path: str | None = None, **updates: Any) -> StackctlConfig:
        """Update configuration values.

        Raises:
            ConfigError: On an unknown key or if the update fails
        """
        config = cls.load_config(custom_path)

        for key, value in updates.items():
            if not hasattr(config, key):
                raise ConfigError(f"Unknown config key: {key}")
            setattr(config, key, value)

        cls.save_config(config, custom_path)
        return config

    @classmethod
    def unset_config(cls, *keys: str, custom_path: str | None = None) -> StackctlConfig:
        """Reset configuration values to their defaults.

        Raises:
            ConfigError: On an unknown key or if the update fails
        """
        config = cls.load_config(custom_path)
        defaults = StackctlConfig()

        for key in keys:
            if not hasattr(config, key):
                raise ConfigError(f"Unknown config key: {key}")
            setattr(config, key, getattr(defaults, key))

        cls.save_config(config, custom_path, remove_keys=keys)
        return config

    @classmethod
    def get_project_id(
        cls, cli_value: str | None = None, custom_path: str | None = None
    ) -> str | None:
        """Get project ID with CLI override.

        Args:
            cli_value: Project ID from CLI argument (takes precedence)
            custom_path: Custom config file path (optional)

        Returns:
            Project ID or None
        """
        if cli_value:
            return cli_value

        return cls.load_config(custom_path).project_id

    @classmethod
    def get_region(cls, cli_value: str | None = None, custom_path: str | None = None) -> str:
        """Get region with CLI override (defaults to eu01)."""
        if cli_value:
            return cli_value

        return cls.load_config(custom_path).region


__all__ = ["DEFAULT_REGION", "ConfigManager", "StackctlConfig"]
