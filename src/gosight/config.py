"""Configuration loading and management for gosight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.gosight.toml)
    3. Project config (./gosight.toml)
    4. Explicit config file
    5. Environment variables (GOSIGHT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(workers=4, fail_fast=True)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ThresholdConfig:
    """Cut-offs used by the summary and hotspot ranking.

    Attributes:
        low_complexity: Upper bound (inclusive) of the Low bucket
        medium_complexity: Upper bound (inclusive) of the Medium bucket
        hotspot_complexity: Cyclomatic complexity above this is a hotspot
        hotspot_nesting: Block nesting above this is a hotspot
        hotspot_maintainability: Maintainability below this is a hotspot
        cognitive_warning: Cognitive score above this adds an issue note
    """

    low_complexity: int = 5
    medium_complexity: int = 10
    hotspot_complexity: int = 10
    hotspot_nesting: int = 4
    hotspot_maintainability: float = 50.0
    cognitive_warning: int = 15

    def __post_init__(self) -> None:
        if self.low_complexity < 1:
            raise InvalidConfigError("low_complexity", self.low_complexity, "must be at least 1")
        if self.medium_complexity < self.low_complexity:
            raise InvalidConfigError(
                "medium_complexity",
                self.medium_complexity,
                "must not be lower than low_complexity",
            )
        if self.hotspot_nesting < 0:
            raise InvalidConfigError(
                "hotspot_nesting", self.hotspot_nesting, "must be non-negative"
            )


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Performance:
            workers: Parallel file workers (None = min(cpu count, 8))
            fail_fast: Abort the run on the first unreadable or unparsable file

        File discovery:
            extensions: Source file suffixes to analyze
            exclude_patterns: Glob patterns matched against root-relative paths
            max_file_size_mb: Files larger than this are skipped
            max_files: Stop discovery after this many files
            follow_symlinks: Descend into symlinked directories
            allow_hidden_files: Include dot-files and dot-directories

        Analysis:
            entry_points: Function names that seed dead-code reachability
            type_cache_size: Maximum entries kept by the type string cache
            strict_duplicates: Compare canonical bodies on a hash hit

        Output:
            verbosity: Logging verbosity level
    """

    workers: Optional[int] = None
    fail_fast: bool = False

    extensions: list[str] = field(default_factory=lambda: [".go"])
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "*_test.go",
            "vendor/*",
            "testdata/*",
            ".git/*",
        ]
    )
    max_file_size_mb: float = 10.0
    max_files: int = 10000
    follow_symlinks: bool = False
    allow_hidden_files: bool = False

    entry_points: list[str] = field(default_factory=lambda: ["main", "init"])
    type_cache_size: int = 10000
    strict_duplicates: bool = True

    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "must not be empty")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if self.type_cache_size < 1:
            raise InvalidConfigError("type_cache_size", self.type_cache_size, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``verbose``/``quiet`` booleans are
            folded into ``verbosity``. ``None`` values are ignored so CLI
            options left unset do not clobber file settings.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".gosight.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "gosight.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    thresholds = merged.pop("thresholds", None)
    if isinstance(thresholds, dict):
        try:
            merged["thresholds"] = ThresholdConfig(**thresholds)
        except TypeError as e:
            raise ConfigurationError(f"Invalid [thresholds] config: {e}")
    elif isinstance(thresholds, ThresholdConfig):
        merged["thresholds"] = thresholds

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Collect GOSIGHT_* environment variables for scalar config fields."""
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"GOSIGHT_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment string into the field's declared type.

    Returns None for types that cannot be set from the environment
    (lists, nested configs).
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none = [t for t in args if t is not type(None)]
        if non_none:
            type_hint = non_none[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, wrapping decode errors."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file '{path}': {e}")
