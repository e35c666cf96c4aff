"""Command classification for kubectl-safe."""

from typing import List

# kubectl commands that can cause data loss or service disruption, in the
# order they are listed in the usage text.
DANGEROUS_COMMAND_ORDER = (
    "delete",
    "apply",
    "create",
    "replace",
    "patch",
    "edit",
    "scale",
    "rollout",
    "drain",
    "cordon",
    "uncordon",
    "taint",
)

DANGEROUS_COMMANDS = frozenset(DANGEROUS_COMMAND_ORDER)


def is_dangerous_command(args: List[str]) -> bool:
    """Check whether the leading kubectl command needs safety checks.

    Only an exact match of ``args[0]`` counts; an empty vector is safe.
    """
    if not args:
        return False
    return args[0] in DANGEROUS_COMMANDS
