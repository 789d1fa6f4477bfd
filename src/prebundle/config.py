"""Configuration management for prebundle."""

import tomllib
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_EXTENSIONS,
    PROGRESS_DELAY_MS,
    PROGRESS_THROTTLE_MS,
    SCAN_PLUGIN_NAME,
)
from .preprocess import PreprocessorGroup

DynamicCompileOptions = Callable[
    [dict[str, Any]], Awaitable[dict[str, Any] | None] | dict[str, Any] | None
]
ScanPredicate = Callable[[Sequence[str]], bool]


class ConfigError(Exception):
    """Configuration file could not be parsed."""

    pass


class ProgressConfig(BaseModel):
    """Throttling for prebundle progress lines."""

    delay_ms: float = Field(default=PROGRESS_DELAY_MS, description="Delay before first line")
    throttle_ms: float = Field(default=PROGRESS_THROTTLE_MS, description="Gap between lines")


class ScanConfig(BaseModel):
    """Detection of the host's dependency scanning sub-phase."""

    plugin_names: list[str] = Field(default_factory=lambda: [SCAN_PLUGIN_NAME])


class PrebundleConfig(BaseModel):
    """Root configuration for prebundle."""

    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    compiler_options: dict[str, Any] = Field(default_factory=dict)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    is_build: bool = False
    is_debug: bool = False


class ResolvedOptions(PrebundleConfig):
    """Configuration plus the runtime collaborators of a plugin instance.

    Attributes:
        preprocess: Preprocessor group run before compiling, if any
        dynamic_compile_options: Hook returning per-file compile option overrides
        is_scanning: Predicate over active host plugin names; defaults to
            matching any name in ``scan.plugin_names``
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    preprocess: PreprocessorGroup | None = None
    dynamic_compile_options: DynamicCompileOptions | None = None
    is_scanning: ScanPredicate | None = None

    def scanning(self, plugin_names: Sequence[str]) -> bool:
        """Return True if ``plugin_names`` indicates the scanning sub-phase."""
        if self.is_scanning is not None:
            return self.is_scanning(plugin_names)
        return any(name in self.scan.plugin_names for name in plugin_names)


def load_config(root: Path) -> PrebundleConfig:
    """Load config from prebundle.toml in ``root``.

    Args:
        root: Directory containing prebundle.toml

    Returns:
        Loaded configuration, or defaults if prebundle.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML
    """
    config_path = root / CONFIG_FILENAME
    if not config_path.exists():
        return PrebundleConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e
    return PrebundleConfig.model_validate(data)


def write_config_template(root: Path) -> Path:
    """Write default prebundle.toml template.

    Args:
        root: Directory to write into

    Returns:
        Path to the written config file
    """
    config_path = root / CONFIG_FILENAME
    template = {
        "extensions": list(DEFAULT_EXTENSIONS),
        "is_build": False,
        "is_debug": False,
        # Passed through to the component compiler, e.g. css = "none"
        "compiler_options": {"dev": False},
        "progress": {"delay_ms": PROGRESS_DELAY_MS, "throttle_ms": PROGRESS_THROTTLE_MS},
        "scan": {"plugin_names": [SCAN_PLUGIN_NAME]},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
