"""Frozen dataclasses for configuration and YAML loader with env-var interpolation."""

from __future__ import annotations

import os
import re
import types
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .catalog.matcher import MATCH_MODES, ExcludeMatcher
from .exceptions import ConfigError

CONFIG_ENV_VAR = "INSTANCE_CATALOG_CONFIG"

DEFAULT_EXCLUDE_LIST: tuple[str, ...] = (
    "a1.metal",
    "a1.medium",
    "a1.large",
    "a1.xlarge",
    "a1.2xlarge",
    "a1.4xlarge",
)

# Historical behavior: an empty exclude list excludes every instance type.
# Set catalog.empty_list_excludes_all to false for "exclude nothing".
EMPTY_LIST_EXCLUDES_ALL = True

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = os.environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any) -> Any:
    """Recursively interpolate env vars in strings throughout a nested structure."""
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v) for v in obj]
    return obj


@dataclass(frozen=True)
class AWSConfig:
    region: str = ""  # empty = boto3 default region resolution
    credential_profile: str = ""  # empty = use default boto3 credential chain
    connect_timeout: int = 10
    read_timeout: int = 30
    max_attempts: int = 3
    page_size: int | None = None  # DescribeInstanceTypes MaxResults, 5..100


@dataclass(frozen=True)
class CatalogConfig:
    exclude_list: tuple[str, ...] = DEFAULT_EXCLUDE_LIST
    match_mode: str = "exact"  # "exact" or "pattern"
    empty_list_excludes_all: bool = EMPTY_LIST_EXCLUDES_ALL

    def __post_init__(self) -> None:
        # YAML yields lists; the exclude list is held immutable
        if isinstance(self.exclude_list, list):
            object.__setattr__(self, "exclude_list", tuple(self.exclude_list))


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    aws: AWSConfig = field(default_factory=AWSConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _get_dataclass_type(ft: Any) -> type | None:
    """Return the underlying dataclass type from a type annotation (handles Optional/X|None)."""
    if isinstance(ft, type) and hasattr(ft, "__dataclass_fields__"):
        return ft
    if isinstance(ft, types.UnionType) or getattr(ft, "__origin__", None) is typing.Union:
        args = [a for a in ft.__args__ if a is not type(None)]
        if len(args) == 1 and isinstance(args[0], type) and hasattr(args[0], "__dataclass_fields__"):
            return args[0]
    return None


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested dataclass fields."""
    if not isinstance(data, dict):
        return data
    field_types = {f.name: f.type for f in cls.__dataclass_fields__.values()}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in field_types:
            continue
        ft = field_types[key]
        # Resolve string annotations to actual types in the module scope
        if isinstance(ft, str):
            ft = eval(ft, globals(), {cls.__name__: cls})  # noqa: S307
        dc_type = _get_dataclass_type(ft)
        if dc_type is not None and isinstance(value, dict):
            kwargs[key] = _build_nested(dc_type, value)
        elif dc_type is not None and value is None:
            continue
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _walk_and_interpolate(raw)
    config = _build_nested(AppConfig, raw)
    _validate(config)
    return config


def resolve_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load the file named by INSTANCE_CATALOG_CONFIG, or fall back to built-in defaults."""
    environ = os.environ if environ is None else environ
    path = environ.get(CONFIG_ENV_VAR)
    if path:
        return load_config(path)
    config = AppConfig()
    _validate(config)
    return config


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    exclude_list = config.catalog.exclude_list
    if not isinstance(exclude_list, tuple):
        raise ConfigError("catalog.exclude_list must be a list of instance type names")
    for entry in exclude_list:
        if not isinstance(entry, str):
            raise ConfigError(f"catalog.exclude_list entries must be strings, got {entry!r}")

    if config.catalog.match_mode not in MATCH_MODES:
        raise ConfigError("catalog.match_mode must be 'exact' or 'pattern'")

    # Compile once here so a bad entry is reported before any AWS client is built
    if exclude_list:
        ExcludeMatcher(exclude_list, config.catalog.match_mode)

    if not isinstance(config.catalog.empty_list_excludes_all, bool):
        raise ConfigError("catalog.empty_list_excludes_all must be true or false")

    if config.aws.connect_timeout <= 0 or config.aws.read_timeout <= 0:
        raise ConfigError("aws.connect_timeout and aws.read_timeout must be > 0")

    if config.aws.max_attempts < 1:
        raise ConfigError("aws.max_attempts must be >= 1")

    page_size = config.aws.page_size
    if page_size is not None and not (isinstance(page_size, int) and 5 <= page_size <= 100):
        raise ConfigError("aws.page_size must be between 5 and 100")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
