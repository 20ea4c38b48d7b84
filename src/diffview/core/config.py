"""Configuration loading and validation for diffview."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

VIEW_MODES = {"unified", "split"}
OUTPUT_FORMATS = {"text", "json"}

# Longest line (in characters) word diff is computed for; longer pairs fall
# back to whole-line highlighting.
DEFAULT_MAX_WORD_DIFF_LENGTH = 2000


class ConfigError(Exception):
    """Error in configuration."""

    pass


@dataclass
class Config:
    """Full application configuration."""

    mode: str = "unified"
    word_diff: bool = True
    max_word_diff_length: int = DEFAULT_MAX_WORD_DIFF_LENGTH
    output_format: str = "text"
    color: bool = True

    def __post_init__(self) -> None:
        validate_config(self)


def validate_config(config: Config) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If any values are invalid.
    """
    if config.mode not in VIEW_MODES:
        raise ConfigError(f"mode must be one of {sorted(VIEW_MODES)}, got {config.mode}")

    if config.output_format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"output_format must be one of {sorted(OUTPUT_FORMATS)}, got {config.output_format}"
        )

    if (
        not isinstance(config.max_word_diff_length, int)
        or isinstance(config.max_word_diff_length, bool)
        or config.max_word_diff_length < 0
    ):
        raise ConfigError(
            f"max_word_diff_length must be a non-negative integer, got {config.max_word_diff_length}"
        )


def find_config_file(start_path: Optional[str] = None) -> Optional[str]:
    """Find .diffview.yaml in current directory or parents.

    Args:
        start_path: Starting directory (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path:
        current = Path(start_path).resolve()
    else:
        current = Path.cwd()

    # Search up to filesystem root or git root
    while True:
        for name in (".diffview.yaml", ".diffview.yml"):
            config_path = current / name
            if config_path.exists():
                return str(config_path)

        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, searches for .diffview.yaml.

    Returns:
        Config object with loaded or default values.

    Raises:
        ConfigError: If the config file is invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}") from e

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a mapping")

    return _parse_config(raw)


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def _parse_config(raw: dict) -> Config:
    """Parse raw YAML dict into Config object."""
    view = _section(raw, "view")
    settings = _section(raw, "settings")

    return Config(
        mode=view.get("mode", "unified"),
        word_diff=bool(view.get("word_diff", True)),
        max_word_diff_length=view.get("max_word_diff_length", DEFAULT_MAX_WORD_DIFF_LENGTH),
        output_format=settings.get("output_format", "text"),
        color=bool(settings.get("color", True)),
    )


def merge_cli_args(config: Config, **kwargs: Any) -> Config:
    """Merge CLI arguments into configuration.

    CLI args take precedence over config file values; ``None`` means the
    option was not given.

    Args:
        config: Base configuration.
        **kwargs: CLI arguments (mode, word_diff, max_word_diff_length,
            output_format, color).

    Returns:
        New Config with merged values.
    """
    values = {
        "mode": config.mode,
        "word_diff": config.word_diff,
        "max_word_diff_length": config.max_word_diff_length,
        "output_format": config.output_format,
        "color": config.color,
    }
    for key in values:
        if kwargs.get(key) is not None:
            values[key] = kwargs[key]

    return Config(**values)
