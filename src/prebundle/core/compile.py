"""Compile a single component file for prebundling."""

import inspect
import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..constants import CSS_STRING_VERSION
from ..models import CompilationRequest

if TYPE_CHECKING:
    from ..config import ResolvedOptions
    from ..services.compiler import Compiler

logger = logging.getLogger(__name__)

TakeTimestamp = Callable[[str], None]


def parse_version(version: str) -> tuple[int, ...]:
    """Parse the numeric release part of a version string ("4.2.1-next.0" -> (4, 2, 1))."""
    release = version.split("-", 1)[0].split("+", 1)[0]
    numbers = []
    for part in release.split("."):
        digits = "".join(ch for ch in part if ch.isdigit())
        numbers.append(int(digits) if digits else 0)
    return tuple(numbers)


def at_least(version: str, minimum: str) -> bool:
    """Return True if ``version`` >= ``minimum``."""
    current = parse_version(version)
    required = parse_version(minimum)
    width = max(len(current), len(required))
    return current + (0,) * (width - len(current)) >= required + (0,) * (width - len(required))


def resolve_css_option(css: Any, compiler_version: str) -> Any:
    """Pick the compiler's spelling for "inject styles into JS" unless CSS is disabled."""
    if css == "none" or css is False:
        return css
    return "injected" if at_least(compiler_version, CSS_STRING_VERSION) else True


async def compile_component(
    options: "ResolvedOptions",
    compiler: "Compiler",
    request: CompilationRequest,
    take_timestamp: TakeTimestamp,
) -> str:
    """Preprocess and compile one component file.

    Args:
        options: Resolved plugin options
        compiler: Component compiler
        request: File to compile and whether to generate server-side rendering output
        take_timestamp: Called with "compileStart" and "compiled" around the compile call

    Returns:
        Compiled module code followed by an inline sourceMappingURL comment

    Raises:
        Exception: Any preprocessing or compile failure, unchanged apart from
            the preprocessing message prefix
    """
    filename = request.filename
    compile_options: dict[str, Any] = {
        **options.compiler_options,
        "css": resolve_css_option(options.compiler_options.get("css"), compiler.version),
        "filename": filename,
        "format": "esm",
        "generate": "ssr" if request.is_server_render else "dom",
    }

    final_code = request.source_text
    if options.preprocess:
        try:
            preprocessed = await compiler.preprocess(final_code, options.preprocess, filename)
        except Exception as e:
            message = str(e)
            prefix = f"Error while preprocessing {filename}"
            prefixed = f"{prefix} - {message}" if message else prefix
            e.args = (prefixed, *e.args[1:])
            # Compiler errors often render from a message attribute instead of args
            if isinstance(getattr(e, "message", None), str):
                e.message = prefixed
            raise
        if preprocessed.map:
            compile_options["sourcemap"] = preprocessed.map
        final_code = preprocessed.code

    dynamic_options = None
    if options.dynamic_compile_options is not None:
        dynamic_options = options.dynamic_compile_options(
            {"filename": filename, "code": final_code, "compileOptions": compile_options}
        )
        if inspect.isawaitable(dynamic_options):
            dynamic_options = await dynamic_options

    if dynamic_options:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"dynamic compile options for {filename}: "
                f"{json.dumps(dynamic_options, default=str)}"
            )
        compile_options = {**compile_options, **dynamic_options}

    take_timestamp("compileStart")
    compiled = compiler.compile(final_code, compile_options)
    take_timestamp("compiled")
    return f"{compiled.js.code}\n//# sourceMappingURL={compiled.js.map.to_url()}"
