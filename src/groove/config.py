"""Configuration file loading and saving.

The config file is YAML validated against ``GrooveConfig``. A missing file
is an empty configuration; a file that cannot be read, parsed or validated
raises ``ConfigError`` with field-level detail.

Usage:
    from groove.config import load_config, set_token

    config = load_config()
    print(config.defaults.limit)

    set_token("abc123")
"""

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from groove.config_schema import OUTPUT_FORMATS, GrooveConfig
from groove.core.errors import ConfigError
from groove.core.logging import get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV_VAR = "GROOVE_CONFIG_PATH"


def get_config_path() -> Path:
    """Get the config file path from environment or default.

    Default is ``$XDG_CONFIG_HOME/groove/config.yaml`` (falling back to
    ``~/.config``).
    """
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "groove" / "config.yaml"


_ERROR_HINTS = {
    "int_type": "must be an integer",
    "int_parsing": "must be an integer",
    "string_type": "must be a string",
    "dict_type": "must be a mapping",
}


def _format_validation_errors(error: ValidationError) -> str:
    """Render each schema violation as one line naming the dotted field path."""
    lines = []
    for err in error.errors():
        field_path = ".".join(str(loc) for loc in err["loc"]) or "(root)"
        hint = _ERROR_HINTS.get(err["type"])
        if hint is None and err["type"] == "literal_error":
            hint = f"must be one of: {', '.join(OUTPUT_FORMATS)}"
        if hint:
            lines.append(f"  - Field '{field_path}' {hint}")
        else:
            lines.append(f"  - Field '{field_path}': {err['msg']}")
    return "\n".join(lines)



def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse the YAML file, treating a missing file as empty.

    Raises:
        ConfigError: On read failure, YAML parse error, or non-mapping content
    """
    if not path.exists():
        logger.debug("Config file not found, using defaults", path=str(path))
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {path}:\n{e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must be a YAML mapping, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None) -> GrooveConfig:
    """Load and validate the configuration.

    Args:
        path: Config file path (default: ``get_config_path()``)

    Raises:
        ConfigError: If the file cannot be loaded or fails validation
    """
    config_path = path or get_config_path()

    data = _load_yaml(config_path)
    try:
        config = GrooveConfig(**data)
    except ValidationError as e:
        raise ConfigError(
            f"Validation failed for {config_path}:\n{_format_validation_errors(e)}"
        ) from e

    logger.debug(
        "Configuration loaded",
        path=str(config_path),
        has_token=config.api_token is not None,
        endpoint=config.api_endpoint,
    )
    return config


def save_config(config: GrooveConfig, path: Path | None = None) -> Path:
    """Write the configuration atomically with owner-only permissions.

    Args:
        config: Configuration to write
        path: Config file path (default: ``get_config_path()``)

    Returns:
        The path written

    Raises:
        ConfigError: If the file cannot be written
    """
    config_path = path or get_config_path()
    content = yaml.safe_dump(
        config.model_dump(exclude_none=True),
        default_flow_style=False,
        sort_keys=False,
    )

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=config_path.parent, prefix=".config-", suffix=".yaml.tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, config_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ConfigError(f"Cannot write {config_path}: {e}") from e

    logger.info("Configuration saved", path=str(config_path))
    return config_path


def set_token(token: str, path: Path | None = None) -> Path:
    """Store an API token in the config file, keeping the other settings."""
    if not token.strip():
        raise ConfigError("Token must not be empty")

    config = load_config(path)
    updated = config.model_copy(update={"api_token": token.strip()})
    return save_config(updated, path)


def mask_token(token: str) -> str:
    """Mask a token for display: first and last four characters only."""
    if len(token) >= 8:
        return f"{token[:4]}...{token[-4:]}"
    return "***"
