"""Dependency prebundling plugin for component files.

The host build drives the plugin through three callbacks: ``on_pass_start``
when a prebundling pass begins, ``on_file_load`` for every component file
the pass needs, and ``on_pass_end`` when the pass is finished. File loads
within a pass may run concurrently; start and end never overlap a load.
"""

import asyncio
import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import ResolvedOptions
from .constants import PLUGIN_NAME
from .core.compile import compile_component
from .core.stats import PackageResolver, build_report, human_duration, resolve_packages
from .models import CompilationRequest, FileStat, HostMessage, LoadArgs, LoadResult, TimestampEvent
from .preprocess import StylePreprocessor
from .services.compiler import Compiler
from .services.errors import to_host_error
from .services.host import HostBuild

logger = logging.getLogger(__name__)

ErrorFormatter = Callable[[BaseException, ResolvedOptions], HostMessage]


def monotonic_ms() -> float:
    """High resolution monotonic clock in milliseconds."""
    return time.perf_counter() * 1000


def component_filter(extensions: Sequence[str]) -> re.Pattern[str]:
    """Build the load filter for component files.

    Matches paths ending in one of ``extensions`` (e.g. ".svelte"), optionally
    followed by a query string.
    """
    names = "|".join(re.escape(ext.removeprefix(".")) for ext in extensions)
    return re.compile(rf"\.({names})(\?.*)?$")


@dataclass
class PluginPassState:
    """Mutable state for one prebundling pass.

    Attributes:
        pass_start_ms: Clock value when the pass started
        last_progress_log_ms: Clock value of the last progress line, None if none yet
        stats: Timing records of successfully compiled files
    """

    pass_start_ms: float = 0.0
    last_progress_log_ms: float | None = None
    stats: list[FileStat] = field(default_factory=list)


class PrebundlePlugin:
    """Compile component files during the host's dependency prebundling.

    Args:
        options: Resolved plugin options
        compiler: Component compiler
        ssr: Compile for server-side rendering
        resolver: Package resolver for the stats report
        error_formatter: Converts compile failures into host diagnostics
        clock: Millisecond clock used for progress and timings
    """

    name = PLUGIN_NAME

    def __init__(
        self,
        options: ResolvedOptions,
        compiler: Compiler,
        ssr: bool = False,
        resolver: PackageResolver | None = None,
        error_formatter: ErrorFormatter = to_host_error,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.options = options
        self.compiler = compiler
        self.ssr = ssr
        self.resolver = resolver or PackageResolver()
        self.error_formatter = error_formatter
        self.clock = clock
        self.filter = component_filter(options.extensions)
        self.state = PluginPassState(pass_start_ms=clock())
        self._build: HostBuild | None = None

    def setup(self, build: HostBuild) -> None:
        """Register the lifecycle callbacks with the host build."""
        self._build = build
        build.on_start(self.on_pass_start)
        build.on_load(self.filter, self.on_file_load)
        build.on_end(self.on_pass_end)

    def set_resolved_config(self, config: Any) -> None:
        """Hand the host's resolved build config to the style preprocessor."""
        style = self.options.preprocess.style if self.options.preprocess else None
        if isinstance(style, StylePreprocessor):
            style.set_resolved_config(config)

    def is_scanning(self) -> bool:
        """Return True if the host build is the dependency scanning sub-phase."""
        if self._build is None:
            return False
        return self.options.scanning(self._build.plugin_names)

    def on_pass_start(self) -> None:
        """Reset pass state."""
        self.state = PluginPassState(pass_start_ms=self.clock())

    async def on_file_load(self, args: LoadArgs) -> LoadResult | None:
        """Compile one component file.

        Returns:
            LoadResult with contents or errors, or None to let the host load
            the file itself (scanning sub-phase or non-component file)
        """
        # The host already scans component files; compiling here would only slow it down
        if self.is_scanning():
            return None
        match = self.filter.search(args.path)
        if match is None:
            return None
        filename = args.path[: match.start(2)] if match.group(2) else args.path

        timestamps: list[TimestampEvent] = []

        def take_timestamp(label: str) -> None:
            timestamps.append(TimestampEvent(label=label, time_ms=self.clock()))

        self.log_progress()
        try:
            code = await asyncio.to_thread(Path(filename).read_text, encoding="utf-8")
            request = CompilationRequest(
                filename=filename, source_text=code, is_server_render=self.ssr
            )
            contents = await compile_component(self.options, self.compiler, request, take_timestamp)
        except Exception as e:
            logger.debug(f"Failed to compile {filename}: {e}")
            return LoadResult(errors=[self.error_formatter(e, self.options)])
        self.state.stats.append(FileStat(filename=filename, timestamps=timestamps))
        return LoadResult(contents=contents)

    async def on_pass_end(self) -> None:
        """Log the final progress line and the stats report."""
        state = self.state
        # A single compile with no progress is a deep component import, not a real pass
        if state.last_progress_log_ms is None and len(state.stats) < 2:
            return
        self.log_progress(done=True)
        try:
            await resolve_packages(state.stats, self.resolver)
            report = build_report(state.stats)
        except Exception:
            logger.warning("Failed to build prebundling compile stats", exc_info=True)
            return
        logger.info(f"prebundling compile stats - ssr: {self.ssr}\n{report}")

    def log_progress(self, done: bool = False) -> None:
        """Log a progress line, throttled unless ``done``."""
        state = self.state
        now = self.clock()
        progress = self.options.progress
        if state.last_progress_log_ms is None:
            elapsed, limit = now - state.pass_start_ms, progress.delay_ms
        else:
            elapsed, limit = now - state.last_progress_log_ms, progress.throttle_ms
        if not done and elapsed <= limit:
            return
        state.last_progress_log_ms = now
        files = f"{len(state.stats)}".rjust(5)
        took = human_duration(now - state.pass_start_ms).rjust(7)
        suffix = " - done" if done else ""
        logger.info(
            f"prebundling svelte dependencies - ssr: {self.ssr} "
            f"files:{files} duration:{took}{suffix}"
        )
