"""Configuration loading and management for codeflux.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.codeflux.toml)
    3. Project config (./codeflux.toml)
    4. Explicit config file
    5. Environment variables (CODEFLUX_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(workers=4, file_extensions=["*.cs", "*.java"])
    >>> config.workers
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .scanning.filters import DEFAULT_FILE_EXTENSIONS

if TYPE_CHECKING:
    from .temporal.retry import RetryPolicy

Verbosity = Literal["quiet", "normal", "verbose"]

DIFF_STRATEGIES = ("greedy", "minimal")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for directory and history analysis.

    Attributes:
        File filtering:
            file_extensions: Glob patterns matched against file names
            ignore_patterns: Regexes matched against slash-normalized relative paths

        Performance tuning:
            workers: Per-commit worker pool size (None = available CPUs)

        Git integration:
            git_executable: Name or path of the git binary
            git_timeout_seconds: Timeout for a single git invocation
            git_max_attempts: Attempts for a git call that fails transiently
            git_retry_base_delay: First backoff delay in seconds
            git_retry_max_delay: Upper bound for any backoff delay

        Diffing:
            diff_strategy: "greedy" (lookahead heuristic) or "minimal" (edit distance)

        Output control:
            verbosity: Logging verbosity level
    """

    file_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    ignore_patterns: list[str] = field(default_factory=list)

    workers: Optional[int] = None

    git_executable: str = "git"
    git_timeout_seconds: float = 60.0
    git_max_attempts: int = 3
    git_retry_base_delay: float = 0.5
    git_retry_max_delay: float = 8.0

    diff_strategy: str = "greedy"

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.file_extensions:
            raise ValueError("file_extensions must contain at least one glob")
        for name in ("file_extensions", "ignore_patterns"):
            value = getattr(self, name)
            if not isinstance(value, (list, tuple)) or not all(isinstance(p, str) for p in value):
                raise ValueError(f"{name} must be a list of strings")

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")

        if self.git_timeout_seconds <= 0:
            raise ValueError("git_timeout_seconds must be positive")
        if self.git_max_attempts < 1:
            raise ValueError("git_max_attempts must be at least 1")
        if self.git_retry_base_delay < 0:
            raise ValueError("git_retry_base_delay must be non-negative")
        if self.git_retry_max_delay < self.git_retry_base_delay:
            raise ValueError("git_retry_max_delay must be at least git_retry_base_delay")

        if self.diff_strategy not in DIFF_STRATEGIES:
            raise ValueError(f"diff_strategy must be one of {', '.join(DIFF_STRATEGIES)}")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")

    @property
    def effective_workers(self) -> int:
        """Worker pool size, falling back to the available CPU count."""
        return self.workers or max(1, os.cpu_count() or 1)

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy for transient git failures."""
        from .temporal.retry import RetryPolicy

        return RetryPolicy(
            max_attempts=self.git_max_attempts,
            base_delay=self.git_retry_base_delay,
            max_delay=self.git_retry_max_delay,
        )


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from a caller's own flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".codeflux.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "codeflux.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

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

    known = {f.name for f in fields(AnalysisConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown configuration key")

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODEFLUX_* environment variables.

    Supported environment variables:
        CODEFLUX_WORKERS: int
        CODEFLUX_GIT_EXECUTABLE: str
        CODEFLUX_GIT_TIMEOUT_SECONDS: float
        CODEFLUX_GIT_MAX_ATTEMPTS: int
        CODEFLUX_GIT_RETRY_BASE_DELAY: float
        CODEFLUX_GIT_RETRY_MAX_DELAY: float
        CODEFLUX_DIFF_STRATEGY: greedy/minimal
        CODEFLUX_VERBOSITY: quiet/normal/verbose
        CODEFLUX_FILE_EXTENSIONS: comma-separated globs
        CODEFLUX_IGNORE_PATTERNS: comma-separated regexes

    Returns:
        Dict of field_name -> parsed_value for any CODEFLUX_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"CODEFLUX_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Lists come in comma-separated
    if origin is list or type_hint is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict:
    """Load a TOML file and return its ``[codeflux]`` table (or the whole file).

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("codeflux", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [codeflux] must be a table")
    return dict(section)


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
