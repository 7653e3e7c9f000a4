"""Configuration loading and parsing for semver-calc."""

from pathlib import Path
from typing import Any

import yaml

from semver_calc.version import VersionError, parse_version

DEFAULT_CONFIG_FILENAME = "semver-calc.yaml"


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


class CalcConfig:
    """Optional configuration loaded from a YAML file."""

    def __init__(self, config_path: str | Path | None = None):
        """Load configuration from a YAML file.

        Args:
            config_path: Path to configuration file (None = defaults only)

        Raises:
            ConfigError: If config file doesn't exist or is invalid
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self._config: dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise ConfigError(f"Configuration file not found: {self.config_path}")

            try:
                with open(self.config_path, "r") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"YAML parsing error in {self.config_path}: {e}")

            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ConfigError(
                    f"Configuration in {self.config_path} must be a mapping"
                )
            self._config = data

        self._validate_config()

    def _validate_config(self) -> None:
        """Validate the types of known configuration keys."""
        if "version-prefix" in self._config:
            if not isinstance(self._config["version-prefix"], str):
                raise ConfigError("'version-prefix' must be a string")

        if "start-version" in self._config:
            start_version = self._config["start-version"]
            if not isinstance(start_version, str):
                raise ConfigError("'start-version' must be a string")
            try:
                parse_version(start_version)
            except VersionError as e:
                raise ConfigError(f"'start-version' is invalid: {e}")

    def get_version_prefix(self) -> str:
        """Get the version prefix from configuration.

        Returns:
            Version prefix string (e.g., 'v') or empty string if not configured
        """
        return self._config.get("version-prefix", "")

    def get_start_version(self) -> str | None:
        """Get the configured previous version, if any."""
        return self._config.get("start-version")


def load_config(
    config_path: str | Path | None = None,
    git_root: Path | None = None,
) -> CalcConfig:
    """Load configuration from file.

    An explicit path must exist. Without one, the default file in the
    repository root is used when present.

    Args:
        config_path: Path to configuration file
        git_root: Repository root to look for the default file in

    Returns:
        Loaded configuration object

    Raises:
        ConfigError: If config file is invalid or cannot be loaded
    """
    if config_path is None and git_root is not None:
        default_path = git_root / DEFAULT_CONFIG_FILENAME
        if default_path.exists():
            config_path = default_path

    return CalcConfig(config_path)


def generate_config_template() -> str:
    """Generate a configuration file template with all parameters documented.

    Returns:
        YAML configuration template as a string with inline documentation
    """
    template = """# semver-calc configuration
#
# Place this file as semver-calc.yaml in the repository root, or pass it
# with --config. Every setting is optional.
#
# Commit types are fixed by the Conventional Commits convention:
#   type!: ...       -> major
#   feat...: ...     -> minor
#   fix...: ...      -> patch
# Builds from branches whose name contains 'main' or 'master' are stable
# releases, every other branch builds prereleases (e.g. 1.3.0-pre.0).

# Prefix printed in front of the calculated version (e.g. "v" for v1.2.3)
# Type: string
# Default: "" (no prefix)
version-prefix: ""

# Version to bump when neither --tag nor --start-version is given
# Type: string (semantic version, a leading "v" is accepted)
# Default: 0.0.0
# start-version: "1.0.0"
"""
    return template
