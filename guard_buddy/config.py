"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE


@dataclass
class GuardConfig:
    """Configuration for rewriting header protection.

    Attributes:
        macro_prefix: Project prefix placed in front of derived guard macros.
        use_workspace_root: Whether macros are derived from the path relative
            to the workspace root (True) or from the bare filename (False).
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        GuardConfig(macro_prefix="acme", use_workspace_root=False)
    """

    macro_prefix: str = ""
    use_workspace_root: bool = True
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_file_size` must be a positive integer")
    """


def load_config(search_path: Path) -> GuardConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.guard-buddy]`` table from `pyproject.toml` and the
    ``[guard-buddy]`` or ``[tool.guard-buddy]`` table from `.guard-buddy.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        GuardConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("include"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "guard-buddy")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".guard-buddy.toml",
            table_paths=[("guard-buddy",), ("tool", "guard-buddy")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return GuardConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> GuardConfig | None:
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
) -> GuardConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys use dashes; dataclass fields use underscores.
    raw_config = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return GuardConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: GuardConfig) -> None:
    """Validate a `GuardConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If the prefix is not a string, the workspace flag is not a
            boolean, or the size limit is not a positive integer. Characters
            outside ``[A-Za-z0-9]`` in the prefix are allowed; macro naming
            replaces them with ``_``.

    Examples:
        validate_config(GuardConfig(macro_prefix="acme"))
    """
    if not isinstance(config.macro_prefix, str):
        raise ConfigError("`macro_prefix` must be a string")
    if not isinstance(config.use_workspace_root, bool):
        raise ConfigError("`use_workspace_root` must be a boolean")

    max_file_size = config.max_file_size
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: GuardConfig, **overrides: object) -> GuardConfig:
    """Apply override values to a `GuardConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        GuardConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `GuardConfig`.

    Examples:
        updated = apply_overrides(config, macro_prefix="acme")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> GuardConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        GuardConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), macro_prefix="acme")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
