"""Core compilation and statistics logic for prebundle.

- sourcemaps: source map path fixes for preprocessed blocks
- compile: preprocess and compile a single component file
- stats: per-file timing and per-package report
"""

from .compile import at_least, compile_component, resolve_css_option
from .sourcemaps import SourceMap, map_to_relative, remove_lang_suffix
from .stats import (
    PackageResolver,
    build_report,
    duration,
    group_stats,
    human_duration,
    resolve_packages,
)

__all__ = [
    "PackageResolver",
    "SourceMap",
    "at_least",
    "build_report",
    "compile_component",
    "duration",
    "group_stats",
    "human_duration",
    "map_to_relative",
    "remove_lang_suffix",
    "resolve_css_option",
    "resolve_packages",
]
