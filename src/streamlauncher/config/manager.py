"""Configuration manager for loading and saving streamlauncher config."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from streamlauncher.config.schema import LauncherConfig
from streamlauncher.utils.errors import ConfigError, InvalidConfigError
from streamlauncher.utils.paths import get_config_dir, get_handoff_file

DEFAULT_CONFIG_HEADER = """\
# streamlauncher configuration
#
# Values set here are defaults; command-line flags take precedence.
# Run `streamlauncher config show` to see the effective configuration.

"""


class ConfigManager:
    """Manages the streamlauncher configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to XDG config dir.
        """
        self.config_dir = config_dir or get_config_dir()
        self.config_file = self.config_dir / "config.yaml"

    def load_config(self) -> LauncherConfig:
        """Load and validate configuration.

        Returns:
            Validated LauncherConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            config = LauncherConfig()
            self.save_config(config)
            return config

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return LauncherConfig(**data)
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: LauncherConfig) -> None:
        """Save configuration.

        Args:
            config: LauncherConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            f.write(DEFAULT_CONFIG_HEADER)
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def set_value(self, key: str, raw_value: str) -> LauncherConfig:
        """Set a configuration value by dotted key and save it.

        The raw value is parsed as YAML, so ``30`` becomes an int, ``true`` a
        bool and ``null`` clears an optional value.

        Args:
            key: Dotted key such as ``schedule.start_offset``
            raw_value: Value as typed on the command line

        Returns:
            The updated configuration

        Raises:
            ConfigError: If the key does not exist
            InvalidConfigError: If the value fails validation
        """
        config = self.load_config()
        data = config.model_dump(mode="json")

        parts = key.split(".")
        node: dict[str, Any] = data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                raise ConfigError(f"Unknown config key: {key}")
            node = child
        if parts[-1] not in node:
            raise ConfigError(f"Unknown config key: {key}")

        try:
            node[parts[-1]] = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            node[parts[-1]] = raw_value

        try:
            updated = LauncherConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid value for {key}: {e}") from e

        self.save_config(updated)
        return updated

    def credentials_dir(self, config: LauncherConfig) -> Path:
        """Directory holding credentials.json and the cached token."""
        if config.credentials_dir is not None:
            return config.credentials_dir.expanduser()
        return self.config_dir

    def handoff_path(self, config: LauncherConfig) -> Path:
        """Path of the broadcast-identifier handoff file."""
        if config.handoff_file is not None:
            return config.handoff_file.expanduser()
        return get_handoff_file()


def list_keys(config: LauncherConfig) -> list[str]:
    """List every dotted configuration key."""
    keys: list[str] = []

    def walk(prefix: str, value: Any) -> None:
        if isinstance(value, dict):
            for name, child in value.items():
                walk(f"{prefix}.{name}" if prefix else name, child)
        else:
            keys.append(prefix)

    walk("", config.model_dump(mode="json"))
    return keys
