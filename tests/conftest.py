"""Shared test fixtures for prebundle tests."""

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from typer.testing import CliRunner

from prebundle.core.sourcemaps import SourceMap
from prebundle.models import LoadArgs, PreprocessResult
from prebundle.preprocess import PreprocessorGroup, run_preprocessors
from prebundle.services.engine import CssOutput, ScriptOutput


class CompileError(Exception):
    """Compiler failure carrying a position like the real compiler's errors."""

    def __init__(self, message: str, filename: str, line: int, column: int, frame: str) -> None:
        super().__init__(message)
        self.filename = filename
        self.start = {"line": line, "column": column}
        self.frame = frame


class FakeCompiler:
    """Compiler that embeds its input in the output module."""

    def __init__(self, version: str = "4.2.0", error: Exception | None = None) -> None:
        self.version = version
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.preprocess_calls = 0

    def compile(self, source: str, options: dict[str, Any]) -> SimpleNamespace:
        self.calls.append((source, options))
        if self.error is not None:
            raise self.error
        code = f"// generate: {options['generate']}\nexport default {json.dumps(source)};"
        source_map = SourceMap(version=3, sources=[options["filename"]], mappings="AAAA")
        return SimpleNamespace(js=SimpleNamespace(code=code, map=source_map))

    async def preprocess(
        self, source: str, group: PreprocessorGroup, filename: str
    ) -> PreprocessResult:
        self.preprocess_calls += 1
        return await run_preprocessors(source, group, filename)


class FakeEngine:
    """Transform engine that records calls and returns predictable output."""

    def __init__(self) -> None:
        self.script_calls: list[tuple[str, str, dict[str, Any]]] = []
        self.style_calls: list[tuple[str, str, Any]] = []
        self.resolve_calls: list[tuple[dict[str, Any], str]] = []
        self.extra_deps: set[str] = {"/project/src/theme.scss"}

    async def transform_script(
        self, content: str, filename: str, options: dict[str, Any]
    ) -> ScriptOutput:
        self.script_calls.append((content, filename, options))
        return ScriptOutput(
            code=content.replace(": string", ""),
            map={"version": 3, "file": filename, "sources": [filename], "mappings": ""},
        )

    async def resolve_config(self, inline_config: dict[str, Any], command: str) -> Any:
        self.resolve_calls.append((inline_config, command))
        return {"resolved": True, "command": command, "inline": inline_config}

    async def preprocess_css(self, code: str, module_id: str, config: Any) -> CssOutput:
        self.style_calls.append((code, module_id, config))
        return CssOutput(
            code=f".compiled {{}}\n{code}",
            map={"version": 3, "file": module_id, "sources": [module_id], "mappings": ""},
            deps={module_id, *self.extra_deps},
        )


class FakeBuild:
    """Host build that records registered callbacks."""

    def __init__(self, plugin_names: list[str] | None = None) -> None:
        self.plugin_names = plugin_names or []
        self.start_callbacks: list[Any] = []
        self.load_callbacks: list[tuple[Any, Any]] = []
        self.end_callbacks: list[Any] = []

    def on_start(self, callback: Any) -> None:
        self.start_callbacks.append(callback)

    def on_load(self, filter: Any, callback: Any) -> None:
        self.load_callbacks.append((filter, callback))

    def on_end(self, callback: Any) -> None:
        self.end_callbacks.append(callback)

    async def load(self, path: str) -> Any:
        """Dispatch a load to the first callback whose filter matches."""
        for filter, callback in self.load_callbacks:
            if filter.search(path):
                return await callback(LoadArgs(path=path))
        return None


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def engine() -> FakeEngine:
    """Create a fake transform engine."""
    return FakeEngine()


@pytest.fixture
def compiler() -> FakeCompiler:
    """Create a fake component compiler."""
    return FakeCompiler()


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """Create two packages with component files.

    Layout:
        node_modules/ui-kit/package.json     (name: ui-kit, 3 components)
        node_modules/icons/package.json      (name: icons, 1 component)
    """
    root = tmp_path / "node_modules"
    packages = {"ui-kit": ["Button", "Card", "Modal"], "icons": ["Star"]}
    for name, components in packages.items():
        pkg = root / name
        (pkg / "src").mkdir(parents=True)
        (pkg / "package.json").write_text(json.dumps({"name": name, "version": "1.0.0"}))
        for component in components:
            (pkg / "src" / f"{component}.svelte").write_text(
                f"<script>export let label = '{component}';</script>\n<p>{{label}}</p>\n"
            )
    return root


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()
