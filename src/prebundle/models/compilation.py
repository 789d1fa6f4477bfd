"""Models exchanged between the host, the plugin and the compiler."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompilationRequest(BaseModel):
    """One component file to compile."""

    model_config = ConfigDict(frozen=True)

    filename: str
    source_text: str
    is_server_render: bool = False


class PreprocessResult(BaseModel):
    """Output of a preprocessor: transformed code with an optional source map."""

    code: str
    map: dict[str, Any] | None = None
    dependencies: list[str] | None = None


class LoadArgs(BaseModel):
    """Arguments the host passes for a single file load."""

    path: str


class HostLocation(BaseModel):
    """Source position attached to a host diagnostic."""

    file: str | None = None
    line: int
    column: int
    line_text: str | None = None


class HostMessage(BaseModel):
    """Diagnostic in the shape the host build understands."""

    text: str
    location: HostLocation | None = None
    detail: str | None = None


class LoadResult(BaseModel):
    """Result of a file load: module contents or diagnostics."""

    contents: str | None = None
    errors: list[HostMessage] = Field(default_factory=list)
