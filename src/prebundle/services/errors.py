"""Conversion of compile failures into host diagnostics."""

import traceback
from typing import TYPE_CHECKING

from ..models import HostLocation, HostMessage

if TYPE_CHECKING:
    from ..config import ResolvedOptions


def _line_from_frame(line: int, frame: str | None) -> str:
    """Extract source line ``line`` from a compiler code frame.

    Frame lines look like ``12: <div>`` with the line number padded on the left.
    """
    if not frame:
        return ""
    for frame_line in frame.splitlines():
        number, sep, text = frame_line.partition(":")
        if sep and number.strip().isdigit() and int(number.strip()) == line:
            return text[1:] if text.startswith(" ") else text
    return ""


def to_host_error(error: BaseException, options: "ResolvedOptions") -> HostMessage:
    """Convert a compiler or preprocessor exception into a HostMessage.

    Args:
        error: Exception raised while compiling a file
        options: Resolved plugin options (controls whether a stack is attached)

    Returns:
        HostMessage with location when the error carries a ``start`` position
    """
    filename = getattr(error, "filename", None)
    frame = getattr(error, "frame", None)
    start = getattr(error, "start", None)

    message = HostMessage(text=str(error) or type(error).__name__)
    line = start.get("line") if isinstance(start, dict) else None
    column = start.get("column", 0) if isinstance(start, dict) else 0
    has_location = type(line) is int and type(column) is int
    if has_location:
        message.location = HostLocation(
            file=filename if isinstance(filename, str) else None,
            line=line,
            column=column,
            line_text=_line_from_frame(line, frame),
        )
    if options.is_build or options.is_debug or not frame or not has_location:
        message.detail = "".join(traceback.format_exception(error))
    return message
