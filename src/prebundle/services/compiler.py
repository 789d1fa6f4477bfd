"""Contract for the component compiler.

The compiler itself is an external collaborator. Adapters implement
``Compiler``; prebundle only relies on the attributes listed here.
"""

from typing import TYPE_CHECKING, Any, Protocol

from ..models import PreprocessResult

if TYPE_CHECKING:
    from ..preprocess import PreprocessorGroup


class SourceMapLike(Protocol):
    """Source map that can be inlined as a URL."""

    def to_url(self) -> str: ...


class CompiledJs(Protocol):
    """JavaScript output of a compile call."""

    code: str
    map: SourceMapLike


class Compiled(Protocol):
    """Full result of a compile call."""

    js: CompiledJs


class Compiler(Protocol):
    """Component compiler entry points.

    Both calls may raise; failures carry optional ``filename``, ``start``
    (``{"line", "column"}``) and ``frame`` attributes used for diagnostics.
    """

    version: str

    def compile(self, source: str, options: dict[str, Any]) -> Compiled: ...

    async def preprocess(
        self, source: str, group: "PreprocessorGroup", filename: str
    ) -> PreprocessResult: ...
