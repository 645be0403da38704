"""Error handling decorator for CLI commands.

Every command reports failures the same way: print the message, then exit
with status 1. Nothing is rolled back.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

import typer

from ..exceptions import CommandError, OptikitError
from . import output

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_cli_error(operation: str, exit_code: int = 1) -> Callable[[F], F]:
    """Decorator for consistent CLI command error handling.

    Args:
        operation: Description of the operation for error messages
        exit_code: Exit code to use on error (default: 1)

    Usage:
        @app.command()
        @handle_cli_error("cleaning project")
        def clean_flutter(ctx: typer.Context):
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except typer.Abort:
                output.warning(f"{operation.capitalize()} cancelled")
                raise typer.Exit(exit_code) from None
            except CommandError as e:
                # The tool's own error text, verbatim
                output.error(f"Error {operation}: {getattr(e, 'stderr', None) or e.message}")
                logger.debug(f"Command failed during {operation}: {e}")
                raise typer.Exit(exit_code) from e
            except OptikitError as e:
                output.error(f"Error {operation}: {e.message}")
                logger.debug(f"Error during {operation}: {e}")
                raise typer.Exit(exit_code) from e
            except Exception as e:
                output.error(f"Error {operation}: {e}")
                logger.error(f"Unexpected error during {operation}: {e}", exc_info=True)
                raise typer.Exit(exit_code) from e

        return wrapper  # type: ignore[return-value]

    return decorator
