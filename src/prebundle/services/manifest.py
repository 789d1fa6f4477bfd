"""Package manifest lookup."""

import json
from pathlib import Path

from ..constants import MANIFEST_NAME


class ManifestError(Exception):
    """Manifest could not be read or has no name."""

    pass


def find_closest_manifest(filename: str | Path) -> Path | None:
    """Find the nearest package manifest above ``filename``.

    Args:
        filename: File whose owning package is wanted

    Returns:
        Path to the manifest, or None if no ancestor directory has one
    """
    path = Path(filename).absolute()
    for directory in path.parents:
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def read_manifest_name(manifest: Path) -> str:
    """Return the ``name`` declared in a manifest.

    Raises:
        ManifestError: If the file is unreadable, not a JSON object, or has no name
    """
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Cannot read {manifest}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ManifestError(f"{manifest} does not declare a package name")
    return data["name"]
