"""Flag validation for kubectl-safe.

This module checks that dangerous commands name their target cluster
context and namespace explicitly, and optionally that the context
exists in the user's kubeconfig.
"""

from typing import Callable, List, Optional

import structlog

from ..executor.models import KubectlError
from .models import (
    CONTEXT_FLAG,
    NAMESPACE_FLAG,
    NOT_SPECIFIED,
    ContextLookupError,
    FlagSpec,
    MissingFlagsError,
    UnknownContextError,
)

logger = structlog.get_logger(__name__)

REQUIRED_FLAGS = (CONTEXT_FLAG, NAMESPACE_FLAG)


def has_flag(args: List[str], flag: FlagSpec) -> bool:
    """Check whether any argument is a spelling of ``flag``.

    Recognised shapes are ``--long``, ``-s``, ``--long=value`` and
    ``-s=value``, anywhere in the vector.
    """
    return any(flag.matches(arg) for arg in args)


def extract_flag_value(args: List[str], long_flag: str, short_flag: str) -> str:
    """Extract the value of a flag for display.

    Supports ``--flag=value`` / ``-f=value`` and ``--flag value`` /
    ``-f value``. The first match from the left wins.

    Returns:
        The flag value, or ``NOT_SPECIFIED`` if the flag has no value
    """
    for i, arg in enumerate(args):
        if arg.startswith(long_flag + "="):
            return arg[len(long_flag) + 1:]
        if arg.startswith(short_flag + "="):
            return arg[len(short_flag) + 1:]
        if arg in (long_flag, short_flag) and i + 1 < len(args):
            return args[i + 1]
    return NOT_SPECIFIED


class FlagValidator:
    """Validates the targeting flags of dangerous commands."""

    def __init__(
        self,
        verify_context: bool = False,
        context_lister: Optional[Callable[[], List[str]]] = None,
    ):
        """Initialize the flag validator.

        Args:
            verify_context: Also require the context to exist in kubeconfig
            context_lister: Callable returning the known context names
        """
        if verify_context and context_lister is None:
            raise ValueError("context_lister is required when verify_context is enabled")

        self.verify_context = verify_context
        self.context_lister = context_lister
        self.logger = structlog.get_logger(self.__class__.__name__)

    def validate_required_flags(self, args: List[str]) -> None:
        """Ensure --context and --namespace are present.

        Args:
            args: Full kubectl argument vector

        Raises:
            MissingFlagsError: One or both flags are absent
            UnknownContextError: The context is not known to kubectl
            ContextLookupError: The known contexts could not be listed
        """
        missing = [flag.long for flag in REQUIRED_FLAGS if not has_flag(args, flag)]
        if missing:
            self.logger.info("Dangerous command missing required flags", missing=missing)
            raise MissingFlagsError(missing)

        if self.verify_context:
            context = extract_flag_value(args, CONTEXT_FLAG.long, CONTEXT_FLAG.short)
            self._verify_context_exists(context)

    def _verify_context_exists(self, context: str) -> None:
        """Check the context against the kubeconfig contexts."""
        try:
            available = self.context_lister()
        except KubectlError as e:
            self.logger.error("Could not list kubectl contexts", error=e.message)
            raise ContextLookupError(e.message, cause=e) from e

        if context not in available:
            self.logger.info("Unknown context requested", context=context, available=available)
            raise UnknownContextError(context, available)

        self.logger.debug("Context verified", context=context)
