"""Safety module for kubectl-safe.

This module provides the safety controls applied to dangerous kubectl commands:
- Command classification
- Required --context/--namespace flag validation
- Optional kubeconfig context verification
- Interactive user confirmation

CRITICAL: Dangerous commands must pass through this module's checks before kubectl runs.
"""
