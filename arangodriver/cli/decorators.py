"""CLI command decorators for arangoctl.

Provides reusable decorators to reduce boilerplate in CLI commands.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
import typer

from arangodriver.cli.output import (
    CLIResponse,
    ErrorCode,
    error_response,
    print_response,
)
from arangodriver.config import ConfigError
from arangodriver.errors import (
    ArangoConnectionError,
    ArangoError,
    InvalidArgumentError,
    is_conflict,
    is_forbidden,
    is_not_found,
    is_unauthorized,
)

F = TypeVar("F", bound=Callable[..., Any])

logger = structlog.get_logger(__name__)


def error_code_for(err: Exception, default: ErrorCode) -> ErrorCode:
    """Map an exception to the most specific ErrorCode."""
    if isinstance(err, ConfigError):
        return ErrorCode.CONFIG_ERROR
    if isinstance(err, ArangoConnectionError):
        return ErrorCode.CONNECTION_ERROR
    if isinstance(err, InvalidArgumentError):
        return ErrorCode.INVALID_ARGUMENT
    if is_unauthorized(err) or is_forbidden(err):
        return ErrorCode.UNAUTHORIZED
    if is_not_found(err):
        return ErrorCode.NOT_FOUND
    if is_conflict(err):
        return ErrorCode.CONFLICT
    return default


def cli_command(
    command_name: str,
    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
) -> Callable[[F], F]:
    """Decorator that wraps CLI commands with standard error handling.

    Provides:
    - Automatic timing via start_time injection
    - JSON error response formatting, with server error details
    - Exit code 1 on failure

    Args:
        command_name: The command identifier for error responses (e.g., "db.list")
        error_code: Error code for failures without a more specific mapping

    Usage:
        @db_app.command("list")
        @cli_command("db.list", ErrorCode.DATABASE_ERROR)
        def db_list(start_time: float = typer.Option(0.0, hidden=True)) -> CLIResponse:
            from arangodriver.cli.commands.databases import list_databases
            return list_databases(start_time)

    The decorated function should:
    - Accept start_time as a hidden option (injected automatically)
    - Return a CLIResponse object
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> None:
            start_time = time.time()
            kwargs.pop("start_time", None)

            try:
                response = func(*args, start_time=start_time, **kwargs)

                if isinstance(response, CLIResponse):
                    print_response(response)
                    if not response.success:
                        raise typer.Exit(1) from None

            except typer.Exit:
                raise
            except Exception as e:
                details = None
                if isinstance(e, ArangoError):
                    details = {"status_code": e.status_code, "error_num": e.error_num}
                logger.debug("cli_command_failed", command=command_name, error=str(e))
                response = error_response(
                    command=command_name,
                    code=error_code_for(e, error_code),
                    message=str(e),
                    details=details,
                    start_time=start_time,
                )
                print_response(response)
                raise typer.Exit(1) from None

        return wrapper  # type: ignore[return-value]

    return decorator
