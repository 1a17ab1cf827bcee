"""Configuration system for lunardisk.

Settings are described by Pydantic models and read from an optional YAML
file. String values may reference environment variables as ``${NAME}``;
references are expanded before validation. Every failure is reported as a
single ``ConfigurationError`` whose message names the file and, for schema
violations, each offending field.
"""

import os
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated, Final, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

# ${NAME} references; names are upper-case letters, digits and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")

# Discovery order: working directory first, then locations under the home directory
CURRENT_DIR_CONFIG_FILES: Final[tuple[str, ...]] = ("lunardisk.yaml", "lunardisk.yml")
HOME_CONFIG_FILES: Final[tuple[str, ...]] = (".lunardisk.yaml", ".config/lunardisk/config.yaml")


class ScanConfig(BaseModel):
    """Configuration for the scan engine.

    Defines the materialization depth cap, the external timeout layered
    over scans, and how many skipped paths are sampled into diagnostics.
    """

    max_depth: Annotated[
        int | None,
        Field(
            ge=0,
            description="Depth below which directories are sized but not materialized",
        ),
    ] = None
    timeout_seconds: Annotated[
        float | None,
        Field(
            gt=0,
            description="Abandon the scan after this many seconds",
        ),
    ] = None
    skipped_path_sample_limit: Annotated[
        int,
        Field(
            ge=0,
            description="Number of skipped paths kept in scan diagnostics",
        ),
    ] = 5


class SearchConfig(BaseModel):
    """Configuration for tree search."""

    limit: Annotated[
        int,
        Field(
            ge=0,
            description="Maximum number of matches retained in search results",
        ),
    ] = 200


class ApplicationConfig(BaseModel):
    """Process-wide settings: how verbose logging is and how it is rendered."""

    log_level: Annotated[
        str,
        Field(
            description="Minimum level of emitted log records",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    log_format: Annotated[
        Literal["text", "json"],
        Field(
            description="Render log records as plain text or JSON lines",
        ),
    ] = "text"


class MainConfig(BaseModel):
    """Root of the configuration file.

    Sections:
    - scan: Scan engine settings
    - search: Tree search settings
    - application: Logging settings

    Every section has defaults, so an empty file (or no file) is valid.
    """

    scan: Annotated[
        ScanConfig,
        Field(
            description="Scan engine configuration",
        ),
    ] = ScanConfig()
    search: Annotated[
        SearchConfig,
        Field(
            description="Tree search configuration",
        ),
    ] = SearchConfig()
    application: Annotated[
        ApplicationConfig,
        Field(
            description="Logging configuration",
        ),
    ] = ApplicationConfig()


class EnvironmentVariableError(Exception):
    """A ``${NAME}`` reference points at an unset environment variable."""


class ConfigurationError(Exception):
    """The configuration file is missing, unreadable, malformed or invalid.

    The message is meant to be shown to the user as-is.
    """


def resolve_env_var(value: str) -> str:
    """Expand ``${NAME}`` references in a string.

    Args:
        value: Text that may contain references

    Returns:
        Text with each reference replaced by the variable's value

    Raises:
        EnvironmentVariableError: If a referenced variable is not set

    Examples:
        >>> os.environ["SCAN_LIMIT"] = "50"
        >>> resolve_env_var("${SCAN_LIMIT}")
        '50'
        >>> resolve_env_var("plain text")
        'plain text'
    """

    def lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        try:
            return os.environ[name]
        except KeyError:
            msg = f"Environment variable '{name}' is referenced in the configuration but not set."
            raise EnvironmentVariableError(msg) from None

    return ENV_VAR_PATTERN.sub(lookup, value)


def _resolve_value(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, dict):
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML boundary
    return value


def resolve_env_vars_in_dict(data: dict[str, object]) -> dict[str, object]:
    """Expand references in every string of a parsed YAML mapping.

    Nested mappings and lists are walked; other scalars are kept unchanged.

    Args:
        data: Parsed YAML mapping

    Returns:
        New mapping with all references expanded

    Raises:
        EnvironmentVariableError: If a referenced variable is not set
    """
    return {key: _resolve_value(value) for key, value in data.items()}


def _first_existing(base: Path, names: Iterable[str]) -> Path | None:
    for name in names:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def discover_config_file(
    *,
    cwd: Path | None = None,
    home: Path | None = None,
) -> Path | None:
    """Find the configuration file to use when none was given explicitly.

    Looks for ``lunardisk.yaml`` / ``lunardisk.yml`` in the working directory,
    then ``~/.lunardisk.yaml`` and ``~/.config/lunardisk/config.yaml``.

    Args:
        cwd: Directory treated as the working directory (defaults to Path.cwd())
        home: Directory treated as the home directory (defaults to Path.home())

    Returns:
        First existing file, or None when there is none
    """
    found = _first_existing(cwd or Path.cwd(), CURRENT_DIR_CONFIG_FILES)
    if found is not None:
        return found

    try:
        home_dir = home or Path.home()
    except RuntimeError:
        # No resolvable home directory (e.g. HOME unset and no passwd entry)
        return None
    return _first_existing(home_dir, HOME_CONFIG_FILES)


def _read_yaml_mapping(config_path: Path) -> dict[str, object]:
    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = f"Failed to parse YAML in {config_path}:\n{e}"
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Could not read configuration file {config_path}: {e}"
        raise ConfigurationError(msg) from e

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        msg = (
            f"Expected YAML dictionary at the top of {config_path}, "
            f"found {type(raw_data).__name__}."
        )
        raise ConfigurationError(msg)
    return raw_data  # pyright: ignore[reportUnknownVariableType]  # YAML boundary


def _describe_validation_error(config_path: Path, error: ValidationError) -> str:
    lines = [f"Configuration validation failed for {config_path}:"]
    for detail in error.errors():
        location = " → ".join(str(part) for part in detail["loc"])
        lines.append(f"  {location}: {detail['msg']} [{detail['type']}]")
    return "\n".join(lines)


def load_main_config(config_path: Path | None) -> MainConfig:
    """Load and validate the configuration file.

    Args:
        config_path: YAML file to load, or None to use defaults only

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is missing, unreadable, malformed,
            references an unset variable or fails validation
    """
    if config_path is None:
        return MainConfig()

    if not config_path.is_file():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg)

    raw_data = _read_yaml_mapping(config_path)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)
    except EnvironmentVariableError as e:
        msg = f"{e}\nConfiguration file: {config_path}"
        raise ConfigurationError(msg) from e

    try:
        return MainConfig.model_validate(resolved_data)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(config_path, e)) from e
