"""Source map path fixes for preprocessed blocks.

Maps produced by the style and script transforms reference the virtual
module id they were given. These helpers point them back at the original
component file. Both functions mutate the map in place and ignore maps or
fields that are missing.
"""

import base64
import json
import os
from typing import Any

SourceMapDict = dict[str, Any]


class SourceMap(dict):
    """Version 3 source map that can render itself as a data URL."""

    def to_url(self) -> str:
        """Return the map inlined as a base64 ``data:`` URL."""
        payload = base64.b64encode(json.dumps(self).encode("utf-8")).decode("ascii")
        return f"data:application/json;charset=utf-8;base64,{payload}"


def map_to_relative(map: SourceMapDict | None, filename: str) -> None:
    """Rewrite ``sources`` relative to the directory of ``filename``.

    ``sourceRoot`` is folded into each source and then removed; ``file``
    becomes the basename of ``filename``.
    """
    if not map:
        return
    dirname = os.path.dirname(filename)
    source_root = map.get("sourceRoot")

    def to_relative(source: str | None) -> str | None:
        if not source:
            return source
        if source.startswith("file://"):
            source_path = source[len("file://") :]
        elif source_root:
            source_path = os.path.join(dirname, source_root, source)
        else:
            source_path = os.path.join(dirname, source)
        return os.path.relpath(os.path.normpath(source_path), dirname or os.curdir)

    if map.get("file"):
        map["file"] = os.path.basename(filename)
    if map.get("sources"):
        map["sources"] = [to_relative(s) for s in map["sources"]]
    map.pop("sourceRoot", None)


def remove_lang_suffix(map: SourceMapDict | None, suffix: str) -> None:
    """Strip a virtual module ``suffix`` from ``file`` and every source."""
    if not map:
        return

    def remove_suffix(value: str | None) -> str | None:
        while suffix and value and value.endswith(suffix):
            value = value[: -len(suffix)]
        return value

    if map.get("file"):
        map["file"] = remove_suffix(map["file"])
    if map.get("sources"):
        map["sources"] = [remove_suffix(s) for s in map["sources"]]
