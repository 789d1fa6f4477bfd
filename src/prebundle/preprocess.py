"""Script and style preprocessors backed by the host's transform engine.

``vite_preprocess`` builds a preprocessor group with independent ``script``
and ``style`` hooks. Each hook returns None for languages it does not
support, which callers treat as "leave the block unchanged".
"""

import logging
import os
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from .constants import LANG_SEP, SUPPORTED_SCRIPT_LANGS, SUPPORTED_STYLE_LANGS
from .core.sourcemaps import map_to_relative, remove_lang_suffix
from .models import PreprocessResult
from .services.engine import TransformEngine

logger = logging.getLogger(__name__)

# Comments are matched so that blocks inside them are left alone
BLOCK_PATTERN = re.compile(
    r"<!--.*?-->|<(?P<tag>script|style)(?P<attrs>\s[^>]*)?>(?P<content>.*?)</(?P=tag)>",
    re.DOTALL | re.IGNORECASE,
)
ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<name>[^\s"'>/=]+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?"""
)
LANG_ATTRIBUTE_PATTERN = re.compile(r"""\s+lang\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+)""")

# Script blocks keep type-only imports so the component compiler can resolve them
SCRIPT_TSCONFIG = {
    "compilerOptions": {
        "importsNotUsedAsValues": "preserve",
        "preserveValueImports": True,
    }
}


@dataclass
class PreprocessorInput:
    """A single script or style block handed to a preprocessor."""

    content: str
    attributes: dict[str, str | bool] = field(default_factory=dict)
    filename: str = ""


Preprocessor = Callable[[PreprocessorInput], Awaitable[PreprocessResult | None]]


@dataclass
class PreprocessorGroup:
    """Script and style hooks run over a component file before compiling."""

    script: Preprocessor | None = None
    style: Preprocessor | None = None


@dataclass(frozen=True)
class InlineConfig:
    """Unresolved host build configuration, resolved on first use."""

    values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedConfig:
    """Host build configuration that is already resolved."""

    config: Any


StyleConfig = InlineConfig | ResolvedConfig


def _lang(attributes: dict[str, str | bool]) -> str | None:
    lang = attributes.get("lang")
    return lang if isinstance(lang, str) else None


class ScriptPreprocessor:
    """Compile typed script blocks to plain script."""

    def __init__(self, engine: TransformEngine) -> None:
        self.engine = engine

    async def __call__(self, block: PreprocessorInput) -> PreprocessResult | None:
        lang = _lang(block.attributes)
        if lang not in SUPPORTED_SCRIPT_LANGS:
            return None
        output = await self.engine.transform_script(
            block.content,
            block.filename,
            {"loader": lang, "target": "esnext", "tsconfig_raw": SCRIPT_TSCONFIG},
        )
        map_to_relative(output.map, block.filename)
        return PreprocessResult(code=output.code, map=output.map)


class StylePreprocessor:
    """Run style blocks through the host CSS pipeline.

    The CSS transform is bound to a resolved build configuration the first
    time a supported block is seen. An embedding plugin can supply its own
    resolved configuration with ``set_resolved_config`` to skip resolution.
    """

    def __init__(self, engine: TransformEngine, config: StyleConfig | None = None) -> None:
        self.engine = engine
        self.config = config or InlineConfig()
        self._resolved_config: Any = None
        self._transform: Callable[[str, str], Awaitable[Any]] | None = None

    def set_resolved_config(self, config: Any) -> None:
        """Use ``config`` instead of resolving one; must be called before first use."""
        self._resolved_config = config

    async def _resolve(self) -> Any:
        if self._resolved_config is not None:
            return self._resolved_config
        if isinstance(self.config, ResolvedConfig):
            return self.config.config
        command = "build" if os.environ.get("NODE_ENV") == "production" else "serve"
        logger.debug(f"Resolving build config for style preprocessing ({command})")
        return await self.engine.resolve_config(self.config.values, command)

    async def _get_transform(self) -> Callable[[str, str], Awaitable[Any]]:
        # Concurrent first calls may both resolve; the results are equivalent
        if self._transform is None:
            config = await self._resolve()
            engine = self.engine

            async def transform(code: str, module_id: str) -> Any:
                return await engine.preprocess_css(code, module_id, config)

            self._transform = transform
        return self._transform

    async def __call__(self, block: PreprocessorInput) -> PreprocessResult | None:
        lang = _lang(block.attributes)
        if lang not in SUPPORTED_STYLE_LANGS:
            return None
        transform = await self._get_transform()
        suffix = f"{LANG_SEP}{lang}"
        module_id = f"{block.filename}{suffix}"
        output = await transform(block.content, module_id)
        remove_lang_suffix(output.map, suffix)
        map_to_relative(output.map, block.filename)
        dependencies = None
        if output.deps:
            dependencies = sorted(d for d in output.deps if not d.endswith(suffix))
        return PreprocessResult(code=output.code, map=output.map or None, dependencies=dependencies)


def vite_preprocess(
    engine: TransformEngine,
    script: bool = True,
    style: bool | StyleConfig = True,
) -> PreprocessorGroup:
    """Create a preprocessor group using the host's transforms.

    Args:
        engine: Host transform engine
        script: Enable the typed script preprocessor
        style: Enable the style preprocessor; pass an InlineConfig or
            ResolvedConfig to control how its build configuration is obtained

    Returns:
        PreprocessorGroup with the enabled hooks set
    """
    group = PreprocessorGroup()
    if script is not False:
        group.script = ScriptPreprocessor(engine)
    if style is not False:
        style_config = style if isinstance(style, InlineConfig | ResolvedConfig) else None
        group.style = StylePreprocessor(engine, style_config)
    return group


def parse_attributes(text: str | None) -> dict[str, str | bool]:
    """Parse tag attributes; valueless attributes map to True."""
    attributes: dict[str, str | bool] = {}
    for match in ATTRIBUTE_PATTERN.finditer(text or ""):
        value = match.group("dq")
        if value is None:
            value = match.group("sq")
        if value is None:
            value = match.group("bare")
        attributes[match.group("name")] = True if value is None else value
    return attributes


async def run_preprocessors(
    source: str, group: PreprocessorGroup, filename: str
) -> PreprocessResult:
    """Apply a preprocessor group to every script and style block of a component.

    Blocks are processed in document order. A transformed block loses its
    ``lang`` attribute since its content is now in the compiler's dialect.
    Per-block maps are not merged, so the result carries no map.

    Args:
        source: Full component source
        group: Preprocessors to apply
        filename: Component path, passed to each preprocessor

    Returns:
        PreprocessResult with the rewritten source and collected dependencies
    """
    parts: list[str] = []
    dependencies: list[str] = []
    position = 0
    for match in BLOCK_PATTERN.finditer(source):
        tag = match.group("tag")
        if tag is None:
            continue
        preprocessor = group.script if tag.lower() == "script" else group.style
        if preprocessor is None:
            continue
        attrs = match.group("attrs") or ""
        block = PreprocessorInput(
            content=match.group("content"),
            attributes=parse_attributes(attrs),
            filename=filename,
        )
        result = await preprocessor(block)
        if result is None:
            continue
        attrs = LANG_ATTRIBUTE_PATTERN.sub("", attrs)
        parts.append(source[position : match.start()])
        parts.append(f"<{tag}{attrs}>{result.code}</{tag}>")
        position = match.end()
        if result.dependencies:
            dependencies.extend(result.dependencies)
    parts.append(source[position:])
    return PreprocessResult(code="".join(parts), dependencies=dependencies or None)
