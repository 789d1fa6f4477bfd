"""Pydantic data models for prebundle.

This package defines the data structures passed through a prebundling pass:
- Per-file timing records (TimestampEvent, FileStat)
- Per-package aggregates for the stats report (PackageStats)
- Compile inputs and preprocessor outputs (CompilationRequest, PreprocessResult)
- Host load arguments, results and diagnostics (LoadArgs, LoadResult, HostMessage)
"""

from .compilation import (
    CompilationRequest,
    HostLocation,
    HostMessage,
    LoadArgs,
    LoadResult,
    PreprocessResult,
)
from .timing import FileStat, PackageStats, TimestampEvent

__all__ = [
    "CompilationRequest",
    "FileStat",
    "HostLocation",
    "HostMessage",
    "LoadArgs",
    "LoadResult",
    "PackageStats",
    "PreprocessResult",
    "TimestampEvent",
]
