"""Constants for prebundle."""

# Plugin identity
PLUGIN_NAME = "vite-plugin-svelte:optimize-svelte"

# Host plugin that marks the dependency scanning sub-phase
SCAN_PLUGIN_NAME = "vite:dep-scan"

DEFAULT_EXTENSIONS = [".svelte"]

# Progress logging (milliseconds)
PROGRESS_DELAY_MS = 2000  # before the first progress line
PROGRESS_THROTTLE_MS = 200  # between subsequent lines

# Compiler versions at or above this accept css="injected"
CSS_STRING_VERSION = "3.53.0"

# Separator for virtual style module ids, e.g. App.svelte.vite-preprocess.scss
LANG_SEP = ".vite-preprocess."

SUPPORTED_STYLE_LANGS = ("css", "less", "sass", "scss", "styl", "stylus", "postcss", "sss")
SUPPORTED_SCRIPT_LANGS = ("ts",)

MANIFEST_NAME = "package.json"
UNKNOWN_PACKAGE = "unknown"

CONFIG_FILENAME = "prebundle.toml"
