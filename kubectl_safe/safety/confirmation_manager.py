"""Confirmation management for kubectl-safe.

This module renders the warning shown before a dangerous kubectl command
runs and reads the user's answer from standard input. Two tiers exist:
a yes/no prompt, and for production contexts an optional stricter prompt
that requires typing the context name.
"""

import sys
from typing import Callable, List, Optional

import structlog
import typer

from .models import (
    CONTEXT_FLAG,
    NAMESPACE_FLAG,
    ConfirmationInputError,
    ConfirmationRequest,
    ConfirmationTier,
    UserCancelledError,
)
from .validator import extract_flag_value

logger = structlog.get_logger(__name__)

AFFIRMATIVE_RESPONSES = frozenset({"yes", "y"})

LineReader = Callable[[], Optional[str]]


def read_stdin_line() -> Optional[str]:
    """Read one line from standard input, or None at end of stream."""
    line = sys.stdin.readline()
    return line if line else None


class ConfirmationManager:
    """Prompts for confirmation of dangerous commands."""

    def __init__(
        self,
        line_reader: LineReader = read_stdin_line,
        strict_production: bool = False,
        production_marker: str = "prod",
    ):
        """Initialize the confirmation manager.

        Args:
            line_reader: Callable returning one input line, or None at EOF
            strict_production: Require typing the context name for production contexts
            production_marker: Substring identifying a production context
        """
        self.line_reader = line_reader
        self.strict_production = strict_production
        self.production_marker = production_marker.lower()
        self.logger = structlog.get_logger(self.__class__.__name__)

    def build_request(self, args: List[str], kubectl_binary: str = "kubectl") -> ConfirmationRequest:
        """Derive the target details and tier for an argument vector."""
        context = extract_flag_value(args, CONTEXT_FLAG.long, CONTEXT_FLAG.short)
        namespace = extract_flag_value(args, NAMESPACE_FLAG.long, NAMESPACE_FLAG.short)

        tier = ConfirmationTier.STANDARD
        if self.strict_production and self.production_marker in context.lower():
            tier = ConfirmationTier.PRODUCTION

        return ConfirmationRequest(
            kubectl_binary=kubectl_binary,
            args=args,
            context=context,
            namespace=namespace,
            tier=tier,
        )

    def confirm(self, request: ConfirmationRequest) -> None:
        """Show the warning and wait for the user's answer.

        Args:
            request: Command and target details to display

        Raises:
            UserCancelledError: The answer was not an accepted confirmation
            ConfirmationInputError: No answer could be read
        """
        self._render_summary(request)

        if request.tier == ConfirmationTier.PRODUCTION:
            typer.secho(
                f"This is a production context. Type the context name '{request.context}' to confirm: ",
                fg=typer.colors.RED,
                bold=True,
                nl=False,
            )
        else:
            typer.secho(
                "Are you sure you want to continue? (yes/no): ",
                fg=typer.colors.YELLOW,
                nl=False,
            )

        response = self._read_response()

        if not self._is_confirmed(request, response):
            self.logger.info(
                "Dangerous command cancelled",
                command=request.command_line,
                tier=request.tier.value,
            )
            typer.secho("Operation cancelled.", fg=typer.colors.RED)
            raise UserCancelledError()

        self.logger.info(
            "Dangerous command confirmed",
            command=request.command_line,
            context=request.context,
            namespace=request.namespace,
            tier=request.tier.value,
        )
        typer.echo("Proceeding with operation...")

    def _render_summary(self, request: ConfirmationRequest) -> None:
        """Print the warning banner and target details."""
        typer.secho("⚠️  DANGEROUS COMMAND DETECTED ⚠️", fg=typer.colors.YELLOW, bold=True)
        typer.echo("")
        typer.echo("You are about to execute: " + typer.style(request.command_line, fg=typer.colors.CYAN))
        typer.echo("")
        typer.echo("Target Details:")
        typer.echo("  Context:   " + typer.style(request.context, fg=typer.colors.CYAN))
        typer.echo("  Namespace: " + typer.style(request.namespace, fg=typer.colors.CYAN))
        typer.echo("")
        typer.echo("This operation may cause data loss or service disruption.")

    def _read_response(self) -> str:
        """Read a single answer line, failing on end of stream."""
        try:
            line = self.line_reader()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error("Failed to read confirmation", error=str(e))
            typer.echo("")
            raise ConfirmationInputError(e) from e

        if line is None:
            self.logger.warning("Standard input closed before confirmation")
            typer.echo("")
            raise ConfirmationInputError()

        return line

    def _is_confirmed(self, request: ConfirmationRequest, response: str) -> bool:
        """Evaluate an answer against the request's tier."""
        if request.tier == ConfirmationTier.PRODUCTION:
            # Exact, case-sensitive match; no second attempt.
            return response.strip() == request.context
        return response.strip().lower() in AFFIRMATIVE_RESPONSES
