"""JSON output formatting for arangoctl.

Every command prints one JSON envelope on stdout so scripts can parse it.
Progress messages go to stderr through rich to keep stdout clean.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import orjson
from rich.console import Console

# Console for stderr output (doesn't pollute JSON stdout)
_stderr_console = Console(stderr=True, force_terminal=None)


class ErrorCode(str, Enum):
    """Standard error codes for CLI responses."""

    CONFIG_ERROR = "CONFIG_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    SERVER_ERROR = "SERVER_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    QUERY_FAILED = "QUERY_FAILED"
    AGENCY_ERROR = "AGENCY_ERROR"
    CLUSTER_ERROR = "CLUSTER_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass
class CLIResponse:
    """Structured CLI response for JSON output."""

    success: bool
    command: str
    data: dict[str, Any] | list[Any] | None = None
    error: dict[str, Any] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_json(self, indent: bool = True) -> str:
        """Convert response to JSON string."""
        result: dict[str, Any] = {
            "success": self.success,
            "command": self.command,
        }

        if self.data is not None:
            result["data"] = self.data

        if self.error is not None:
            result["error"] = self.error

        if self.metadata:
            result["metadata"] = self.metadata

        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(result, option=option, default=str).decode()


def success_response(
    command: str,
    data: dict[str, Any] | list[Any],
    start_time: float | None = None,
    **extra_metadata: Any,
) -> CLIResponse:
    """Create a successful CLI response."""
    metadata: dict[str, Any] = {}

    if start_time is not None:
        metadata["duration_ms"] = int((time.time() - start_time) * 1000)

    if isinstance(data, list):
        metadata["count"] = len(data)
    elif isinstance(data, dict) and "results" in data:
        metadata["count"] = len(data["results"])

    metadata.update(extra_metadata)

    return CLIResponse(
        success=True,
        command=command,
        data=data,
        metadata=metadata,
    )


def error_response(
    command: str,
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
    start_time: float | None = None,
) -> CLIResponse:
    """Create an error CLI response."""
    metadata: dict[str, Any] = {}

    if start_time is not None:
        metadata["duration_ms"] = int((time.time() - start_time) * 1000)

    error_dict: dict[str, Any] = {
        "code": code.value,
        "message": message,
    }

    if details:
        error_dict["details"] = details

    return CLIResponse(
        success=False,
        command=command,
        error=error_dict,
        metadata=metadata,
    )


def print_response(response: CLIResponse) -> None:
    """Print response to stdout."""
    print(response.to_json())


def progress(message: str) -> None:
    """Print progress message to stderr (doesn't pollute JSON output)."""
    _stderr_console.print(f"[dim]PROGRESS:[/dim] {message}", highlight=False)


def warn(message: str) -> None:
    """Print warning message to stderr."""
    _stderr_console.print(f"[yellow]WARNING:[/yellow] {message}", highlight=False)


def is_terminal() -> bool:
    """Check if stderr is a terminal (supports rich output)."""
    return _stderr_console.is_terminal
