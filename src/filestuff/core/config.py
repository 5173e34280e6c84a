"""Configuration system for filestuff.

This module implements the configuration schema using Pydantic for
validation, with support for YAML files, environment variable resolution
and fail-fast validation with actionable error messages.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from filestuff.core.data.filesystem.local import (
    DEFAULT_PACKAGE_EXTENSIONS,
    normalize_package_extensions,
)
from filestuff.exceptions import ConfigurationError, EnvironmentVariableError
from filestuff.types.models import ResourceKey, TraversalMode
from filestuff.utils.logging import configure_logging

# Regular expression pattern for environment variable references
# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")


class TraversalConfig(BaseModel):
    """Configuration for directory traversal.

    Defines the default traversal mode, which directory suffixes are treated
    as opaque packages, and whether hidden entries are enumerated.
    """

    default_mode: Annotated[
        TraversalMode,
        Field(
            description="Traversal mode used when a load does not specify one",
        ),
    ] = TraversalMode.SHALLOW
    package_extensions: Annotated[
        list[str],
        Field(
            description="Directory suffixes treated as packages and never expanded",
        ),
    ] = sorted(DEFAULT_PACKAGE_EXTENSIONS)
    skip_hidden: Annotated[
        bool,
        Field(
            description="Leave entries whose name starts with a dot out of the tree",
        ),
    ] = False

    @field_validator("package_extensions", mode="after")
    @classmethod
    def validate_package_extensions(cls, v: list[str]) -> list[str]:
        """Normalize package suffixes.

        Args:
            v: Raw suffixes

        Returns:
            Sorted suffixes, lowercase with a leading dot

        Raises:
            ValueError: If a suffix contains a path separator
        """
        for extension in v:
            if "/" in extension or "\\" in extension:
                msg = f"Package extension must not contain a path separator, got: {extension!r}"
                raise ValueError(msg)
        return sorted(normalize_package_extensions(v))


class MetadataConfig(BaseModel):
    """Configuration for metadata capture.

    Extra keys are requested on top of the default key set for every entry.
    """

    extra_keys: Annotated[
        list[ResourceKey],
        Field(
            description="Additional metadata keys to capture for every entry",
        ),
    ] = []


class LoggingConfig(BaseModel):
    """Configuration for the ``filestuff`` logger."""

    level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    enable_console: Annotated[
        bool,
        Field(
            description="Write log records to stderr",
        ),
    ] = True
    log_file: Annotated[
        Path | None,
        Field(
            description="Optional file to append log records to",
        ),
    ] = None

    @field_validator("log_file", mode="after")
    @classmethod
    def validate_log_file_parent_exists(cls, v: Path | None) -> Path | None:
        """Validate that the log file parent directory exists.

        Args:
            v: Log file path

        Returns:
            Validated path

        Raises:
            ValueError: If parent directory does not exist
        """
        if v is not None and not v.parent.exists():
            msg = f"Log file parent directory does not exist: {v.parent}"
            raise ValueError(msg)
        return v


class FilestuffConfig(BaseModel):
    """Top-level filestuff configuration schema.

    Aggregates all configuration sections, each of which has defaults:
    - traversal: Traversal mode and package handling
    - metadata: Extra metadata keys
    - logging: Logger level and handlers
    """

    traversal: Annotated[
        TraversalConfig,
        Field(
            description="Directory traversal configuration",
        ),
    ] = TraversalConfig()
    metadata: Annotated[
        MetadataConfig,
        Field(
            description="Metadata capture configuration",
        ),
    ] = MetadataConfig()
    logging: Annotated[
        LoggingConfig,
        Field(
            description="Logging configuration",
        ),
    ] = LoggingConfig()


def apply_logging_config(config: LoggingConfig) -> None:
    """Configure the ``filestuff`` logger from a LoggingConfig section.

    Args:
        config: Validated logging configuration
    """
    _ = configure_logging(
        log_level=config.level,
        enable_console=config.enable_console,
        log_file=config.log_file,
    )


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Parses ${VARIABLE_NAME} syntax and replaces with environment variable values.
    Supports multiple environment variable references in a single string.

    Args:
        value: String potentially containing environment variable references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a required environment variable is missing

    Examples:
        >>> os.environ["DATA_ROOT"] = "/srv/data"
        >>> resolve_env_var("${DATA_ROOT}/logs/filestuff.log")
        '/srv/data/logs/filestuff.log'
        >>> resolve_env_var("no variables here")
        'no variables here'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before loading the configuration."
            )
            raise EnvironmentVariableError(msg, context={"env_var": var_name})

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a dictionary.

    Traverses nested dictionaries and lists, resolving environment variable
    references in string values. Non-string values are preserved as-is.

    Args:
        data: Dictionary potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a required environment variable is missing

    Examples:
        >>> os.environ["LOG_DIR"] = "/var/log"
        >>> resolve_env_vars_in_dict({"logging": {"log_file": "${LOG_DIR}/fs.log"}})
        {'logging': {'log_file': '/var/log/fs.log'}}
    """
    result: dict[str, object] = {}

    for key, value in data.items():
        result[key] = _resolve_env_vars_in_value(value)

    return result


def _resolve_env_vars_in_value(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, dict):
        # YAML data is untyped at load time; validated by Pydantic after resolution
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve_env_vars_in_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML list items
    # Non-string, non-container values preserved as-is (int, float, bool, None)
    return value


def load_config(config_path: Path) -> FilestuffConfig:
    """Load and validate filestuff configuration from a YAML file.

    Loads the configuration file, resolves environment variables, and
    validates against the FilestuffConfig schema.

    Args:
        config_path: Path to the configuration YAML file

    Returns:
        Validated FilestuffConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded, an environment
            variable is missing, or validation fails

    Example:
        With ``default_mode: deep`` under ``traversal``::

            config = load_config(Path("config/filestuff.yaml"))
            config.traversal.default_mode  # TraversalMode.DEEP
    """
    if not config_path.exists():
        msg = (
            f"Configuration file not found: {config_path}\n"
            f"Please create a configuration file at this location."
        )
        raise ConfigurationError(msg, path=config_path)

    try:
        with config_path.open("r") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg, path=config_path) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg, path=config_path) from e

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}\n"
            f"Configuration file must contain key-value pairs."
        )
        raise ConfigurationError(msg, path=config_path)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable before loading the configuration."
        )
        raise ConfigurationError(msg, path=config_path, context=dict(e.context)) from e

    try:
        config = FilestuffConfig.model_validate(resolved_data)
    except ValidationError as e:
        # Format validation errors with field-level diagnostics
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"])
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Configuration file: {config_path}")
        error_lines.append("Please fix the above errors and try again.")

        msg = "\n".join(error_lines)
        raise ConfigurationError(msg, path=config_path) from e

    return config
