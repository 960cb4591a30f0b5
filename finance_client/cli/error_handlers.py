"""Enhanced error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from finance_client.cli.utils.formatters import format_error, format_warning
from finance_client.config.settings import FinanceClientConfig
from finance_client.services.error_classifier import (
    ClientError,
    ConnectivityError,
    ServerError,
)


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


class InvalidInputError(CLIError):
    """Error related to command arguments that cannot be used."""

    pass


def _echo_hint(hint: Optional[str]) -> None:
    if hint:
        click.echo(format_warning(f"Hint: {hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Backend error messages are shown verbatim; they are already worded for
    end users.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-5 for known error types, 130 on abort, 255 otherwise)
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        _echo_hint(error.recovery_hint)
        return 1

    elif (
        isinstance(error, ValidationError)
        and error.title == FinanceClientConfig.__name__
    ):
        click.echo(format_error("Configuration Error: invalid settings"))
        for detail in error.errors():
            location = ".".join(str(part) for part in detail["loc"])
            click.echo(f"  {location}: {detail['msg']}")
        _echo_hint("Check your environment variables and .env file")
        return 1

    elif isinstance(error, ServerError):
        status = f" (HTTP {error.status_code})" if error.status_code else ""
        click.echo(format_error(f"Server Error{status}: {error.message}"))
        return 2

    elif isinstance(error, ConnectivityError):
        click.echo(format_error(error.message))
        _echo_hint("Check API_BASE_URL and whether the backend is running")
        return 3

    elif isinstance(error, ClientError):
        click.echo(format_error(error.message))
        if debug and error.__cause__ is not None:
            click.echo(f"Cause: {type(error.__cause__).__name__}: {error.__cause__}")
        return 4

    elif isinstance(error, InvalidInputError):
        click.echo(format_error(f"Invalid Input: {error.message}"))
        _echo_hint(error.recovery_hint)
        return 5

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                )
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Example:
        @click.command()
        @click.pass_context
        def my_command(ctx):
            with with_error_handling(ctx.obj["debug"]):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if isinstance(exc_val, Exception) and not isinstance(
                exc_val, click.exceptions.Exit
            ):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False  # Don't suppress exceptions

    return ErrorHandler(debug)
