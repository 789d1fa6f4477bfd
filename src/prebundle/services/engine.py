"""Contract for the host's script and CSS transform engines."""

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

ConfigCommand = Literal["build", "serve"]


@dataclass
class ScriptOutput:
    """Result of transforming a script block."""

    code: str
    map: dict[str, Any] | None = None


@dataclass
class CssOutput:
    """Result of running a style block through the CSS pipeline."""

    code: str
    map: dict[str, Any] | None = None
    deps: set[str] = field(default_factory=set)


class TransformEngine(Protocol):
    """Transforms provided by the host build tool."""

    async def transform_script(
        self, content: str, filename: str, options: dict[str, Any]
    ) -> ScriptOutput: ...

    async def resolve_config(
        self, inline_config: dict[str, Any], command: ConfigCommand
    ) -> Any: ...

    async def preprocess_css(self, code: str, module_id: str, config: Any) -> CssOutput: ...
