"""Pytest configuration and shared fixtures for kubectl-safe tests."""

from typing import Callable, Generator, Iterable, List, Optional
from unittest.mock import Mock

import pytest
import structlog
import structlog.testing

from kubectl_safe.executor.kubectl_executor import KubectlExecutor
from kubectl_safe.plugin import KubectlSafePlugin, PluginConfig


class FakeLineReader:
    """Line reader that replays canned answers and records each read."""

    def __init__(self, lines: Iterable[Optional[str]] = ()):
        self.lines: List[Optional[str]] = list(lines)
        self.calls = 0

    def __call__(self) -> Optional[str]:
        self.calls += 1
        if not self.lines:
            return None
        return self.lines.pop(0)


@pytest.fixture(autouse=True)
def log_capture() -> Generator[structlog.testing.LogCapture, None, None]:
    """Capture structured logs instead of printing them."""
    capture = structlog.testing.LogCapture()
    structlog.configure(
        processors=[capture],
        cache_logger_on_first_use=False,
    )
    yield capture
    structlog.reset_defaults()


@pytest.fixture
def test_config() -> PluginConfig:
    """Create a test configuration with both lineage toggles off."""
    return PluginConfig(
        kubectl_binary="kubectl",
        verify_context=False,
        strict_production=False,
        production_marker="prod",
        log_level="WARNING",
    )


@pytest.fixture
def line_reader() -> Callable[..., FakeLineReader]:
    """Factory for fake standard input readers."""
    return FakeLineReader


@pytest.fixture
def spy_executor() -> Mock:
    """kubectl executor spy that records calls instead of spawning kubectl."""
    executor = Mock(spec=KubectlExecutor)
    executor.run.return_value = 0
    executor.list_contexts.return_value = ["prod", "staging", "kind-dev"]
    return executor


@pytest.fixture
def make_plugin(test_config: PluginConfig, spy_executor: Mock):
    """Build a plugin wired to the spy executor and a fake stdin."""

    def _make(answers: Iterable[Optional[str]] = (), config: Optional[PluginConfig] = None):
        reader = FakeLineReader(answers)
        plugin = KubectlSafePlugin(
            config or test_config,
            executor=spy_executor,
            line_reader=reader,
        )
        return plugin, reader

    return _make
