"""
Configuration loader — reads doctor.yml into a DoctorConfig.

The config file is optional: when none is found, defaults apply.
An explicit path that is missing or invalid is an error.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from sdkdoctor.core.models.config import DoctorConfig

logger = logging.getLogger(__name__)

# Default config filename
DOCTOR_CONFIG_FILE = "doctor.yml"


class ConfigError(Exception):
    """Raised when doctor configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for doctor.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to doctor.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / DOCTOR_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, search: bool = True) -> DoctorConfig:
    """Load and validate doctor configuration.

    Args:
        path: Explicit path to doctor.yml. If None, searches upward
            from the cwd (when ``search`` is True).
        search: Whether to search for a config file when ``path`` is None.

    Returns:
        Validated DoctorConfig (defaults if no file was found).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file() if search else None
        if path is None:
            logger.debug("No %s found, using defaults", DOCTOR_CONFIG_FILE)
            return DoctorConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading doctor config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return DoctorConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = DoctorConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid doctor configuration: {e}") from e

    logger.info("Loaded config with %d remedy definition(s)", len(config.remedies))
    return config
