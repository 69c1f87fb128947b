"""Configuration loading for mdxbuild.

Settings are layered: field defaults, then ``mdxbuild.yaml``, then
``MDXBUILD_*`` environment variables.

Contract:
- Inputs: Config file path, environment variables
- Outputs: BuildSettings objects
- Side Effects: Writes a commented default mdxbuild.yaml when none exists
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from ..storage.paths import get_config_dir
from .settings import BuildSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = """# mdxbuild configuration

# "development" attaches source locations to elements in built programs
environment: "production"
log_level: "info"

# Cache group used when a build request names none
default_group: "default"

# mdxd listen address
host: "127.0.0.1"
port: 8430
"""


def get_config_path() -> Path:
    return get_config_dir() / "mdxbuild.yaml"


def create_default_config() -> None:
    """Write the commented default config unless a config file exists."""
    config_path = get_config_path()
    if not config_path.exists():
        config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
        logger.info(f"Created default config: {config_path}")


def _read_file_values(config_path: Path) -> dict[str, Any]:
    """Return the BuildSettings fields set in a YAML file.

    An unreadable or malformed file contributes nothing.
    """
    try:
        values = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return {}

    if not isinstance(values, dict):
        logger.warning(f"Failed to load config from {config_path}: expected a mapping")
        return {}

    unknown = sorted(str(key) for key in values if key not in BuildSettings.model_fields)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {', '.join(unknown)}")
    return {key: value for key, value in values.items() if key in BuildSettings.model_fields}


def load_config(config_path: Path | None = None) -> BuildSettings:
    """Load build settings from YAML and the environment.

    Args:
        config_path: Config file to read (default: mdxbuild.yaml in the config
            dir, created on first use)

    Returns:
        Validated build settings; environment variables win over the file
    """
    if config_path is None:
        create_default_config()
        config_path = get_config_path()

    file_values = _read_file_values(config_path) if config_path.exists() else {}

    # Fields pydantic-settings filled from MDXBUILD_* variables count as set
    from_env = BuildSettings().model_dump(exclude_unset=True)
    settings = BuildSettings(**{**file_values, **from_env})

    logger.info(f"Configuration loaded: environment={settings.environment}, log_level={settings.log_level}")
    return settings
