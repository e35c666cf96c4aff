"""kubectl-safe: interactive safety net for dangerous kubectl commands."""

__version__ = "0.1.2"
