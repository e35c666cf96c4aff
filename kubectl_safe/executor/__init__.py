"""Executor module for kubectl-safe.

This module provides execution of the underlying kubectl binary:
- Transparent pass-through with inherited standard streams
- Captured queries for parsing kubectl output
- Exit status propagation
"""
