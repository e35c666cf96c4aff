"""kubectl-safe plugin - Main entry point.

This module provides the kubectl plugin that wraps dangerous kubectl
commands in safety checks. Safe commands are passed straight through to
kubectl; dangerous ones must name --context and --namespace explicitly and
be confirmed interactively before they run.

CRITICAL SAFETY NOTE: A dangerous command must never reach kubectl when
flag validation fails or the user does not confirm it.
"""

import logging
import os
import sys
from typing import List, Optional

import structlog
import typer
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from . import __version__
from .executor.kubectl_executor import KubectlExecutor
from .executor.models import KubectlError
from .safety.classifier import DANGEROUS_COMMAND_ORDER, is_dangerous_command
from .safety.confirmation_manager import ConfirmationManager, LineReader, read_stdin_line
from .safety.models import SafetyError
from .safety.validator import FlagValidator

# Load environment variables
load_dotenv()

logger = structlog.get_logger(__name__)

VERSION_FLAGS = ("--version", "-v")

USAGE_TEMPLATE = """kubectl-safe: Interactive safety net for dangerous kubectl commands

Usage:
  kubectl safe <kubectl-command> [flags]

This plugin acts as a safety wrapper around kubectl commands. For dangerous operations,
it will:
  - Require explicit --context and --namespace flags
  - Show an interactive confirmation prompt
  - Display target cluster and namespace information

Examples:
  kubectl safe delete pod mypod --context=prod --namespace=default
  kubectl safe apply -f deployment.yaml --context=staging --namespace=myapp

Dangerous commands that trigger safety checks:
  {commands}

For safe commands, this plugin acts as a transparent pass-through to kubectl.
"""


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def configure_logging(level: str = "WARNING") -> None:
    """Configure structured logging on standard error."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class PluginConfig(BaseModel):
    """Configuration for the kubectl-safe plugin."""

    kubectl_binary: str = Field(
        default_factory=lambda: os.getenv("KUBECTL_SAFE_KUBECTL", "kubectl"),
        description="kubectl executable name or path",
    )

    # Safety Configuration
    verify_context: bool = Field(
        default_factory=lambda: _env_flag("KUBECTL_SAFE_VERIFY_CONTEXT"),
        description="Require --context to name a context from the kubeconfig",
    )
    strict_production: bool = Field(
        default_factory=lambda: _env_flag("KUBECTL_SAFE_STRICT_PRODUCTION"),
        description="Require typing the context name for production contexts",
    )
    production_marker: str = Field(
        default_factory=lambda: os.getenv("KUBECTL_SAFE_PRODUCTION_MARKER", "prod"),
        description="Substring that marks a context as production",
    )

    log_level: str = Field(
        default_factory=lambda: os.getenv("KUBECTL_SAFE_LOG_LEVEL", "WARNING"),
        description="Log level for diagnostics on standard error",
    )


class KubectlSafePlugin:
    """Main kubectl-safe implementation.

    Classifies the kubectl command, forwards safe commands untouched and
    runs dangerous ones only after flag validation and user confirmation.
    """

    def __init__(
        self,
        config: PluginConfig,
        executor: Optional[KubectlExecutor] = None,
        line_reader: LineReader = read_stdin_line,
    ):
        """Initialize the plugin.

        Args:
            config: Plugin configuration settings
            executor: kubectl executor, created from config if not provided
            line_reader: Source of the confirmation answer
        """
        self.config = config
        self.logger = structlog.get_logger(self.__class__.__name__)

        self.executor = executor or KubectlExecutor(kubectl_binary=config.kubectl_binary)
        self.validator = FlagValidator(
            verify_context=config.verify_context,
            context_lister=self.executor.list_contexts,
        )
        self.confirmation_manager = ConfirmationManager(
            line_reader=line_reader,
            strict_production=config.strict_production,
            production_marker=config.production_marker,
        )

    def execute(self, args: List[str]) -> int:
        """Run one kubectl-safe invocation.

        Args:
            args: Arguments after the plugin name

        Returns:
            Process exit status
        """
        args = list(args)

        if not args:
            self.show_usage()
            return 0

        if len(args) == 1 and args[0] in VERSION_FLAGS:
            typer.echo(f"kubectl-safe {__version__}")
            return 0

        try:
            if not is_dangerous_command(args):
                self.logger.debug("Passing safe command through", command=args[0])
                return self.executor.run(args)

            self.logger.info("Dangerous command detected", command=args[0])
            self.validator.validate_required_flags(args)

            request = self.confirmation_manager.build_request(args, self.config.kubectl_binary)
            self.confirmation_manager.confirm(request)

            return self.executor.run(args)

        except (SafetyError, KubectlError) as e:
            self.logger.warning(
                "kubectl-safe invocation failed",
                error_code=e.error_code,
                error=e.message,
                details=e.details,
            )
            typer.echo(f"Error: {e.message}", err=True)
            return e.exit_code

    def show_usage(self) -> None:
        """Print help including the current list of dangerous commands."""
        typer.echo(USAGE_TEMPLATE.format(commands=", ".join(DANGEROUS_COMMAND_ORDER)))


def create_app() -> typer.Typer:
    """Create the Typer CLI application."""
    app = typer.Typer(
        name="kubectl-safe",
        help="Interactive safety net for dangerous kubectl commands",
        add_completion=False,
    )

    @app.command(
        add_help_option=False,
        context_settings={
            "allow_extra_args": True,
            "ignore_unknown_options": True,
            "allow_interspersed_args": False,
        },
    )
    def run(ctx: typer.Context) -> None:
        """Run a kubectl command through the safety checks."""
        config = PluginConfig()
        configure_logging(config.log_level)

        plugin = KubectlSafePlugin(config)

        try:
            exit_code = plugin.execute(list(ctx.args))
        except KeyboardInterrupt:
            logger.info("Received interrupt signal, aborting")
            raise typer.Exit(130)

        raise typer.Exit(exit_code)

    return app


def main() -> None:
    """Main entry point for the kubectl-safe plugin."""
    app = create_app()
    app()


if __name__ == "__main__":
    main()
