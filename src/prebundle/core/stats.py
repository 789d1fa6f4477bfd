"""Compile timing statistics grouped by owning package."""

import asyncio
import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from ..constants import UNKNOWN_PACKAGE
from ..models import FileStat, PackageStats, TimestampEvent
from ..services.manifest import ManifestError, find_closest_manifest, read_manifest_name

logger = logging.getLogger(__name__)

REPORT_HEADER = ("library", "files", "time", "avg")


def duration(timestamps: Sequence[TimestampEvent], to: str, from_: str | None = None) -> float:
    """Milliseconds between two events.

    Args:
        timestamps: Ordered events of one file
        to: Label of the end event (must be present)
        from_: Label of the start event; defaults to the event just before ``to``

    Returns:
        Time at ``to`` minus time at ``from_``
    """
    to_index = next(i for i, t in enumerate(timestamps) if t.label == to)
    if from_ is None:
        from_index = to_index - 1
    else:
        from_index = next(i for i, t in enumerate(timestamps) if t.label == from_)
    return timestamps[to_index].time_ms - timestamps[from_index].time_ms


def human_duration(ms: float) -> str:
    """Format milliseconds: 99.9ms below 100ms, seconds (0.10s) above."""
    if ms < 100:
        return f"{ms:.1f}ms"
    return f"{ms / 1000:.2f}s"


class PackageResolver:
    """Attribute files to the package whose manifest is closest above them.

    Every discovered package directory is remembered, so files under a
    known directory do not trigger another manifest lookup.
    """

    def __init__(self, find_manifest: Callable[[str], Path | None] = find_closest_manifest) -> None:
        self.find_manifest = find_manifest
        self._packages: dict[str, str] = {}

    def cached(self, filename: str) -> str | None:
        """Return the package name for ``filename`` from known directories only."""
        path = os.path.abspath(filename)
        matches = [prefix for prefix in self._packages if path.startswith(prefix)]
        if not matches:
            return None
        return self._packages[max(matches, key=len)]

    async def resolve(self, filename: str) -> str | None:
        """Return the owning package name, or None if no manifest is found."""
        name = self.cached(filename)
        if name is not None:
            return name
        manifest = await asyncio.to_thread(self.find_manifest, filename)
        if manifest is None:
            return None
        try:
            name = await asyncio.to_thread(read_manifest_name, manifest)
        except ManifestError as e:
            logger.debug(f"Ignoring manifest for {filename}: {e}")
            return None
        self._packages[os.path.join(str(manifest.parent), "")] = name
        return name


async def resolve_packages(stats: Sequence[FileStat], resolver: PackageResolver) -> None:
    """Fill in ``package_name`` for every stat."""

    async def resolve(stat: FileStat) -> None:
        stat.package_name = await resolver.resolve(stat.filename)

    await asyncio.gather(*(resolve(stat) for stat in stats))


def group_stats(stats: Sequence[FileStat]) -> list[PackageStats]:
    """Group stats by package, most files first."""
    grouped: dict[str, PackageStats] = {}
    for stat in stats:
        name = stat.package_name or UNKNOWN_PACKAGE
        group = grouped.setdefault(name, PackageStats(name=name))
        group.file_count += 1
        group.compile_time_ms += duration(stat.timestamps, "compiled")
    return sorted(grouped.values(), key=lambda g: g.file_count, reverse=True)


def format_table(rows: Sequence[Sequence[str]]) -> str:
    """Render rows as tab separated columns; first column left aligned, others right."""
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = []
    for row in rows:
        cells = [
            cell.ljust(widths[i]) if i == 0 else cell.rjust(widths[i]) for i, cell in enumerate(row)
        ]
        lines.append("\t".join(cells))
    return "\n".join(lines)


def build_report(stats: Sequence[FileStat]) -> str:
    """Build the per-package compile stats table.

    Files without a resolved package are reported under "unknown".
    """
    rows: list[Sequence[str]] = [REPORT_HEADER]
    for group in group_stats(stats):
        rows.append(
            (
                group.name,
                str(group.file_count),
                human_duration(group.compile_time_ms),
                human_duration(group.average_ms),
            )
        )
    return format_table(rows)
