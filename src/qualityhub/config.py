"""Configuration loading and management for QualityHub.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in QualityHubConfig)
    2. Global config (~/.qualityhub.toml)
    3. Project config (<root>/qualityhub.toml)
    4. Explicit config file
    5. Environment variables (QUALITYHUB_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(output_format="markdown")
    >>> config.output_format
    'markdown'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .history import DEFAULT_HISTORY_DIR, DEFAULT_HISTORY_FILE

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["rich", "markdown", "json"]

CONFIG_FILE_NAME = "qualityhub.toml"
GLOBAL_CONFIG_NAME = ".qualityhub.toml"
ENV_PREFIX = "QUALITYHUB_"
DEFAULT_API_ENDPOINT = "http://localhost:8080"

_OUTPUT_FORMATS = ("rich", "markdown", "json")
_VERBOSITIES = ("quiet", "normal", "verbose")

DEFAULT_CONFIG_TEMPLATE = """\
# QualityHub configuration

# Project name used when neither --project nor the build environment provides one
# project_name = "my-service"

# Where run history is kept (relative to the project root)
history_dir = ".qualityhub"
history_file = "history.json"

# Record every analysis in the history log
save_history = true

# Default renderer for `qualityhub analyze`: rich, markdown or json
output_format = "rich"

# Logging: quiet, normal or verbose, optionally mirrored to a file
verbosity = "normal"
# log_file = "qualityhub.log"

# QualityHub server used by `qualityhub push`
api_endpoint = "http://localhost:8080"
# api_key = "..."  (or set QUALITYHUB_API_KEY)
"""


@dataclass(frozen=True)
class QualityHubConfig:
    """Settings for the CLI wrapper around the analysis core.

    Attributes:
        project_name: Fallback project name for ``parse``
        history_dir: Directory holding the history log, relative to the root
        history_file: File name of the history log
        save_history: Append each analysis to the history log
        output_format: Default renderer for ``analyze``
        output_file: Write rendered output here instead of stdout
        verbosity: Logging verbosity level
        log_file: Also append log lines to this file
        api_endpoint: Base URL of the QualityHub server for ``push``
        api_key: Bearer token sent with uploads
    """

    project_name: Optional[str] = None
    history_dir: str = DEFAULT_HISTORY_DIR
    history_file: str = DEFAULT_HISTORY_FILE
    save_history: bool = True
    output_format: OutputFormat = "rich"
    output_file: Optional[str] = None
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None
    api_endpoint: str = DEFAULT_API_ENDPOINT
    api_key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.output_format not in _OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format", self.output_format, f"must be one of {', '.join(_OUTPUT_FORMATS)}"
            )
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"must be one of {', '.join(_VERBOSITIES)}"
            )
        if not self.history_file:
            raise InvalidConfigError("history_file", self.history_file, "must not be empty")
        if not self.api_endpoint.startswith(("http://", "https://")):
            raise InvalidConfigError(
                "api_endpoint", self.api_endpoint, "must be an http:// or https:// URL"
            )

    def history_path(self, root: Optional[Path] = None) -> Path:
        """Resolve the history log location against ``root`` (cwd by default)."""
        base = Path(self.history_dir)
        if not base.is_absolute():
            base = (root or Path.cwd()) / base
        return base / self.history_file


def load_config(
    config_file: Optional[Path] = None, root: Optional[Path] = None, **overrides
) -> QualityHubConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        root: Project root searched for ``qualityhub.toml`` (cwd by default)
        **overrides: Direct overrides (typically from CLI flags); None is ignored

    Returns:
        Validated QualityHubConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_checked(global_config, "global config"))

    project_config = (root or Path.cwd()) / CONFIG_FILE_NAME
    if project_config.exists():
        merged.update(_load_toml_checked(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_checked(config_file, "config file"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return QualityHubConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def write_default_config(path: Path) -> Path:
    """Write the commented default config to ``path``; never overwrites."""
    if path.exists():
        raise ConfigurationError(f"Config file already exists: {path}")
    path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    return path


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from QUALITYHUB_* environment variables.

    Supported environment variables:
        QUALITYHUB_PROJECT_NAME: str
        QUALITYHUB_HISTORY_DIR: str
        QUALITYHUB_HISTORY_FILE: str
        QUALITYHUB_SAVE_HISTORY: bool (true/false/1/0)
        QUALITYHUB_OUTPUT_FORMAT: rich/markdown/json
        QUALITYHUB_OUTPUT_FILE: str
        QUALITYHUB_VERBOSITY: quiet/normal/verbose
        QUALITYHUB_LOG_FILE: str
        QUALITYHUB_API_ENDPOINT: str
        QUALITYHUB_API_KEY: str
    """
    type_hints = get_type_hints(QualityHubConfig)
    result: dict[str, Any] = {}

    for field_name in QualityHubConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # str and Literal fields are taken as-is; validation happens in __post_init__
    return value


def _load_toml_checked(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
