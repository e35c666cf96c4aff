"""kubectl executor for kubectl-safe.

This module launches the real kubectl binary, either as a transparent
pass-through sharing the terminal or as a query whose output is parsed.
"""

import shutil
import subprocess
from typing import List, Optional

import structlog

from .models import (
    KubectlExecutionError,
    KubectlNotFoundError,
    ProcessSpec,
    StreamMode,
)

logger = structlog.get_logger(__name__)

# Query used to enumerate the contexts known to the active kubeconfig
GET_CONTEXTS_ARGS = ["config", "get-contexts", "-o", "name"]


class KubectlExecutor:
    """Runs kubectl as a child process and propagates its exit status."""

    def __init__(self, kubectl_binary: str = "kubectl"):
        """Initialize the kubectl executor.

        Args:
            kubectl_binary: Name or path of the kubectl executable
        """
        self.kubectl_binary = kubectl_binary
        self.logger = structlog.get_logger(self.__class__.__name__)

    def is_available(self) -> bool:
        """Check whether the kubectl executable is on PATH."""
        return shutil.which(self.kubectl_binary) is not None

    def run(self, args: List[str]) -> int:
        """Run kubectl with the terminal's standard streams.

        Args:
            args: Arguments forwarded verbatim to kubectl

        Returns:
            0 when kubectl succeeds

        Raises:
            KubectlNotFoundError: kubectl could not be spawned
            KubectlExecutionError: kubectl exited with a non-zero status
        """
        spec = ProcessSpec.inherited(self.kubectl_binary, args)
        self._execute(spec)
        return 0

    def list_contexts(self) -> List[str]:
        """List the context names known to kubectl.

        Standard output is captured and parsed one name per line; standard
        error is left attached to the terminal.

        Returns:
            Context names with blank lines discarded
        """
        spec = ProcessSpec.capturing_stdout(self.kubectl_binary, GET_CONTEXTS_ARGS)
        stdout = self._execute(spec) or ""

        contexts = [line.strip() for line in stdout.splitlines() if line.strip()]
        self.logger.debug("Listed kubectl contexts", context_count=len(contexts))
        return contexts

    def _execute(self, spec: ProcessSpec) -> Optional[str]:
        """Launch a process spec and return its captured stdout, if any."""
        self.logger.debug(
            "Executing kubectl",
            command=str(spec),
            stdout=spec.stdout.value,
        )

        try:
            result = subprocess.run(
                spec.argv,
                stdin=self._stream(spec.stdin),
                stdout=self._stream(spec.stdout),
                stderr=self._stream(spec.stderr),
                text=True,
                check=False,
            )
        except (FileNotFoundError, PermissionError) as e:
            self.logger.error(
                "Failed to spawn kubectl",
                command=spec.command,
                error=str(e),
                kubectl_on_path=self.is_available(),
            )
            raise KubectlNotFoundError(
                f"{spec.command} executable could not be started: {e}",
                command=spec.command,
            ) from e

        if result.returncode != 0:
            exit_code = self._exit_status(result.returncode)
            self.logger.warning(
                "kubectl exited with non-zero status",
                command=str(spec),
                returncode=result.returncode,
                exit_code=exit_code,
            )
            if result.returncode < 0:
                message = f"{spec.command} was terminated by signal {-result.returncode}"
            else:
                message = f"{spec.command} exited with status {result.returncode}"
            raise KubectlExecutionError(message, exit_code=exit_code, command=str(spec))

        return result.stdout

    @staticmethod
    def _exit_status(returncode: int) -> int:
        """Convert a subprocess return code to a shell exit status.

        A negative code means the child was killed by that signal; shells
        report this as 128 + signal number.
        """
        if returncode < 0:
            return 128 - returncode
        return returncode

    @staticmethod
    def _stream(mode: StreamMode) -> Optional[int]:
        """Map a stream mode to the subprocess argument."""
        return subprocess.PIPE if mode == StreamMode.CAPTURE else None
