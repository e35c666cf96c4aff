"""Execution models for kubectl-safe.

This module defines the process specification used to launch kubectl
and the errors raised when launching or running it fails.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StreamMode(str, Enum):
    """How a child process standard stream is wired."""
    INHERIT = "inherit"  # Share the parent's stream
    CAPTURE = "capture"  # Pipe into the parent for parsing


class ProcessSpec(BaseModel):
    """Represents a kubectl process to be launched."""

    command: str = Field(..., description="Executable name or path")
    args: List[str] = Field(default_factory=list, description="Arguments passed to the executable")

    stdin: StreamMode = Field(StreamMode.INHERIT, description="Standard input wiring")
    stdout: StreamMode = Field(StreamMode.INHERIT, description="Standard output wiring")
    stderr: StreamMode = Field(StreamMode.INHERIT, description="Standard error wiring")

    @classmethod
    def inherited(cls, command: str, args: List[str]) -> "ProcessSpec":
        """Spec for a pass-through run sharing every standard stream."""
        return cls(command=command, args=list(args))

    @classmethod
    def capturing_stdout(cls, command: str, args: List[str]) -> "ProcessSpec":
        """Spec for a query whose output is parsed; stderr still reaches the user."""
        return cls(command=command, args=list(args), stdout=StreamMode.CAPTURE)

    @property
    def argv(self) -> List[str]:
        """Full argument vector including the executable."""
        return [self.command, *self.args]

    def __str__(self) -> str:
        """String representation of the command."""
        return " ".join(self.argv)


class KubectlError(Exception):
    """Base exception for kubectl-related errors."""

    exit_code: int = 1

    def __init__(self, message: str, error_code: str = "KUBECTL_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class KubectlNotFoundError(KubectlError):
    """Raised when the kubectl executable cannot be spawned."""

    def __init__(self, message: str = "kubectl executable not found in PATH", command: Optional[str] = None):
        super().__init__(message, "KUBECTL_NOT_FOUND")
        self.details = {"command": command}


class KubectlExecutionError(KubectlError):
    """Raised when a kubectl command exits with a non-zero status."""

    def __init__(self, message: str, exit_code: int, command: Optional[str] = None):
        super().__init__(message, "KUBECTL_EXECUTION_ERROR")
        self.exit_code = exit_code
        self.details = {
            "exit_code": exit_code,
            "command": command,
        }
