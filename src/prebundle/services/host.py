"""Contract for the host build that drives the plugin lifecycle."""

from collections.abc import Awaitable, Callable, Sequence
from re import Pattern
from typing import Protocol

from ..models import LoadArgs, LoadResult

StartCallback = Callable[[], None]
LoadCallback = Callable[[LoadArgs], Awaitable[LoadResult | None]]
EndCallback = Callable[[], Awaitable[None]]


class HostBuild(Protocol):
    """Build handle passed to ``setup``.

    ``plugin_names`` lists the plugins configured for the current build.
    """

    @property
    def plugin_names(self) -> Sequence[str]: ...

    def on_start(self, callback: StartCallback) -> None: ...

    def on_load(self, filter: Pattern[str], callback: LoadCallback) -> None: ...

    def on_end(self, callback: EndCallback) -> None: ...
