"""External collaborator contracts for prebundle.

This package describes the systems prebundle talks to but does not own:
- compiler: component compiler protocol
- engine: script/CSS transform engine protocol
- host: build host lifecycle protocol
- manifest: package manifest lookup
- errors: diagnostic formatting for compile failures
"""

from .compiler import Compiled, CompiledJs, Compiler, SourceMapLike
from .engine import ConfigCommand, CssOutput, ScriptOutput, TransformEngine
from .errors import to_host_error
from .host import HostBuild
from .manifest import ManifestError, find_closest_manifest, read_manifest_name

__all__ = [
    "Compiled",
    "CompiledJs",
    "Compiler",
    "ConfigCommand",
    "CssOutput",
    "HostBuild",
    "ManifestError",
    "ScriptOutput",
    "SourceMapLike",
    "TransformEngine",
    "find_closest_manifest",
    "read_manifest_name",
    "to_host_error",
]
