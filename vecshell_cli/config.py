import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

import yaml

from vecshell_exception_model.exception import ConfigurationException

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "VECSHELL_CONFIG_FILE"
ROOT_ENV = "VECSHELL_ROOT"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ShellConfig:
    """
    Session configuration, fixed for the lifetime of the shell.

    Attributes:
        base_url: Root URL of the vector-storage service.
        prompt: Text written before each input line.
        keep_going: Report remote errors and reprompt instead of ending the session.
        log_level: Name of the logging level for the process.
    """
    base_url: str = "http://localhost:8000"
    prompt: str = "> "
    keep_going: bool = False
    log_level: str = "WARNING"


def _normalise_log_level(value, path: Optional[str] = None) -> str:
    if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
        raise ConfigurationException(
            f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}", path)
    return value.upper()


def _validate_settings(settings: dict, path: str) -> dict:
    for key in ("base_url", "prompt"):
        if key in settings and not isinstance(settings[key], str):
            raise ConfigurationException(f"{key} must be a string, got {settings[key]!r}", path)
    # Quoted YAML booleans arrive as strings
    if "keep_going" in settings and not isinstance(settings["keep_going"], bool):
        raise ConfigurationException(
            f"keep_going must be true or false, got {settings['keep_going']!r}", path)
    if "log_level" in settings:
        settings["log_level"] = _normalise_log_level(settings["log_level"], path)
    return settings


def _load_file_settings(path: str) -> dict:
    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationException(f"Invalid YAML: {e}", path) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationException("Top level of the configuration file must be a mapping", path)
    shell_cfg = config.get("shell")
    if shell_cfg is None:
        return {}
    if not isinstance(shell_cfg, dict):
        raise ConfigurationException("'shell' must be a mapping", path)

    known = {name for name in ShellConfig.__dataclass_fields__}
    unknown = set(shell_cfg) - known
    if unknown:
        logger.warning(f"Ignoring unknown settings in {path}: {', '.join(sorted(map(str, unknown)))}")
    return _validate_settings({key: value for key, value in shell_cfg.items() if key in known}, path)


def load_config(
        root: Optional[str] = None,
        keep_going: Optional[bool] = None,
        log_level: Optional[str] = None
) -> ShellConfig:
    """
    Build the session configuration.

    Later sources win: defaults, the YAML file named by ``VECSHELL_CONFIG_FILE``
    (its ``shell`` mapping), ``VECSHELL_ROOT``, then the explicit arguments.

    Raises:
        ConfigurationException: If the file cannot be parsed, is not shaped as
            a mapping, or holds a setting of the wrong type or an unknown log level.
    """
    config = ShellConfig()

    # Support get config from config files
    config_file = os.getenv(CONFIG_FILE_ENV)
    if config_file and os.path.exists(config_file):
        config = replace(config, **_load_file_settings(config_file))

    env_root = os.getenv(ROOT_ENV)
    if env_root:
        config = replace(config, base_url=env_root)

    overrides = {}
    if root is not None:
        overrides["base_url"] = root
    if keep_going is not None:
        overrides["keep_going"] = keep_going
    if log_level is not None:
        overrides["log_level"] = _normalise_log_level(log_level)
    return replace(config, **overrides)
