"""Core module for diffview."""

from diffview.core.config import (
    Config,
    ConfigError,
    find_config_file,
    load_config,
    merge_cli_args,
)
from diffview.core.engine import DiffViewEngine, EngineError
from diffview.core.types import DiffView, FileView, HunkView, RenderedLine, RenderedSplitLine

__all__ = [
    "Config",
    "ConfigError",
    "load_config",
    "find_config_file",
    "merge_cli_args",
    "DiffViewEngine",
    "EngineError",
    "DiffView",
    "FileView",
    "HunkView",
    "RenderedLine",
    "RenderedSplitLine",
]
