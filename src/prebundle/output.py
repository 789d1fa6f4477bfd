"""Command results for the prebundle CLI, as JSON or rich renderables."""

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Console


@dataclass
class OutputContext:
    """Sends each command result either to stdout as JSON or to the console."""

    console: Console
    json_mode: bool = False

    def result(self, data: dict[str, Any], renderable: Any) -> None:
        """Emit ``data`` in JSON mode, ``renderable`` otherwise."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))
        else:
            self.console.print(renderable)

    def error(self, message: str) -> None:
        self.result({"error": message}, f"[red]Error: {message}[/red]")
