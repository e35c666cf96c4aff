"""Safety models for kubectl-safe.

This module defines data models for the guard workflow, including the
flags a dangerous command must carry, confirmation requests, and the
errors raised when a command is blocked.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Display value for a flag that does not appear in the argument vector
NOT_SPECIFIED = "<not specified>"


class FlagSpec(BaseModel):
    """A kubectl flag with its long and short spellings."""

    long: str = Field(..., description="Long form, e.g. --context")
    short: str = Field(..., description="Short form, e.g. -c")
    label: str = Field(..., description="Human-readable name")

    def matches(self, arg: str) -> bool:
        """Check whether a single argument is any spelling of this flag."""
        if arg in (self.long, self.short):
            return True
        return arg.startswith(self.long + "=") or arg.startswith(self.short + "=")


CONTEXT_FLAG = FlagSpec(long="--context", short="-c", label="Context")
NAMESPACE_FLAG = FlagSpec(long="--namespace", short="-n", label="Namespace")


class ConfirmationTier(str, Enum):
    """How strictly a dangerous command must be confirmed."""

    STANDARD = "standard"
    PRODUCTION = "production"


class ConfirmationRequest(BaseModel):
    """Everything needed to render and evaluate a confirmation prompt."""

    kubectl_binary: str = Field("kubectl", description="Executable shown in the summary")
    args: List[str] = Field(..., description="Argument vector to be forwarded")
    context: str = Field(NOT_SPECIFIED, description="Target context for display")
    namespace: str = Field(NOT_SPECIFIED, description="Target namespace for display")
    tier: ConfirmationTier = Field(ConfirmationTier.STANDARD, description="Confirmation strictness")

    @property
    def command_line(self) -> str:
        """Reconstructed command line as the user would type it."""
        return f"{self.kubectl_binary} {' '.join(self.args)}"


class SafetyError(Exception):
    """Base exception for commands blocked by the guard."""

    exit_code: int = 1

    def __init__(self, message: str, error_code: str = "SAFETY_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class MissingFlagsError(SafetyError):
    """Raised when a dangerous command lacks --context and/or --namespace."""

    def __init__(self, missing: List[str]):
        message = (
            f"dangerous command requires explicit {' and '.join(missing)} flag(s). "
            "This ensures you're targeting the correct cluster and namespace"
        )
        super().__init__(message, "MISSING_FLAGS")
        self.missing = list(missing)
        self.details = {"missing": self.missing}


class UnknownContextError(SafetyError):
    """Raised when the requested context is not in the kubeconfig."""

    def __init__(self, context: str, available: List[str]):
        message = (
            f"context '{context}' not found in kubeconfig. "
            f"Available contexts: {', '.join(available) if available else '<none>'}"
        )
        super().__init__(message, "UNKNOWN_CONTEXT")
        self.details = {"context": context, "available": list(available)}


class ContextLookupError(SafetyError):
    """Raised when the list of known contexts could not be obtained."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(f"failed to get available contexts: {message}", "CONTEXT_LOOKUP_FAILED")
        self.cause = cause
        self.details = {"cause": type(cause).__name__ if cause else None}


class UserCancelledError(SafetyError):
    """Raised when the user declines a confirmation prompt."""

    def __init__(self, message: str = "operation cancelled by user"):
        super().__init__(message, "USER_CANCELLED")


class ConfirmationInputError(SafetyError):
    """Raised when the confirmation answer could not be read."""

    def __init__(self, cause: Optional[Exception] = None):
        reason = str(cause) if cause else "end of input"
        super().__init__(f"failed to read user input: {reason}", "INPUT_ERROR")
        self.cause = cause
