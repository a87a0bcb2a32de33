"""Configuration loading and management."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

MAX_FILE_SIZE_ENV_VAR = "NOTEMARK_MAX_FILE_SIZE"


@dataclass
class NotemarkConfig:
    """Configuration for rendering and editing notes.

    Attributes:
        vault_dir: Directory holding the note vault, relative to the config
            file location or absolute.
        search_settle_delay: Seconds to wait after a search change before
            scrolling the first match into view.
        copy_confirm_seconds: Seconds a code block copy stays confirmed.
        cache_size: Number of parsed documents kept by the render cache.
        max_file_size: Maximum note size in bytes that will be read.
        allow_raw_html: Whether the HTML renderer passes raw markup through
            instead of escaping it.
        empty_placeholder: Text shown for an empty note.

    Examples:
        NotemarkConfig(vault_dir="notes", cache_size=8)
    """

    vault_dir: str = "vault"

    # Editor timing
    search_settle_delay: float = 0.3
    copy_confirm_seconds: float = 2.0

    # Rendering
    cache_size: int = 32
    allow_raw_html: bool = False
    empty_placeholder: str = "Empty buffer"

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`cache_size` must be a positive integer")
    """


def load_config(search_path: Path) -> NotemarkConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.notemark]`` table from `pyproject.toml` and the ``[notemark]``
    or ``[tool.notemark]`` table from `.notemark.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        NotemarkConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "notemark")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".notemark.toml",
            table_paths=[("notemark",), ("tool", "notemark")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return NotemarkConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> NotemarkConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> NotemarkConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        config = NotemarkConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error

    vault_dir = Path(config.vault_dir).expanduser()
    if not vault_dir.is_absolute():
        vault_dir = config_file.parent / vault_dir
    return replace(config, vault_dir=str(vault_dir))


def validate_config(config: NotemarkConfig) -> None:
    """Validate a `NotemarkConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If a field has the wrong type, a delay is negative, a
            limit is non-positive, or a required text field is empty.

    Examples:
        validate_config(NotemarkConfig(cache_size=4))
    """
    _ensure_integers({"cache_size": config.cache_size, "max_file_size": config.max_file_size})
    _ensure_numbers(
        {
            "search_settle_delay": config.search_settle_delay,
            "copy_confirm_seconds": config.copy_confirm_seconds,
        }
    )

    if not isinstance(config.vault_dir, str) or not config.vault_dir:
        raise ConfigError("`vault_dir` must be a non-empty string")
    if not isinstance(config.empty_placeholder, str) or not config.empty_placeholder:
        raise ConfigError("`empty_placeholder` must be a non-empty string")
    if not isinstance(config.allow_raw_html, bool):
        raise ConfigError("`allow_raw_html` must be a boolean")

    if config.search_settle_delay < 0:
        raise ConfigError("`search_settle_delay` must be >= 0")
    if config.copy_confirm_seconds <= 0:
        raise ConfigError("`copy_confirm_seconds` must be > 0")

    for key in ("cache_size", "max_file_size"):
        if getattr(config, key) <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def apply_overrides(config: NotemarkConfig, **overrides: object) -> NotemarkConfig:
    """Apply override values to a `NotemarkConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        NotemarkConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `NotemarkConfig`.

    Examples:
        updated = apply_overrides(config, vault_dir="notes", allow_raw_html=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> NotemarkConfig:
    """Load, override, and validate configuration.

    The ``NOTEMARK_MAX_FILE_SIZE`` environment variable takes precedence over
    file settings but not over explicit overrides.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        NotemarkConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), allow_raw_html=True)
    """
    config = load_config(search_path)
    config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def get_max_file_size(default: int) -> int:
    """Resolve the maximum allowed note size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ConfigError: If the environment value is not a positive integer.
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ConfigError(error_message) from error

    if max_size <= 0:
        raise ConfigError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}.")

    return max_size


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_numbers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"`{key}` must be a number")
