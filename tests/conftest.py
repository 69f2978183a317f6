"""Shared test fixtures for reqkit.

Provides fixtures for faking the network with :class:`httpx.MockTransport`,
recording retry sleeps and log messages, isolating configuration
directories, and running CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from reqkit.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once CliRunner restores the real streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Network and timing fakes
# ---------------------------------------------------------------------------


class RecordingLogger:
    """Collects every message passed to ``error``."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, *args: Any) -> None:
        self.messages.append(" ".join(str(a) for a in args))


class CallCounter:
    """MockTransport handler that replays a scripted list of outcomes.

    Each outcome is either an :class:`httpx.Response` or an exception
    instance to raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def sleeps() -> list[float]:
    """List that records every backoff delay when passed to ``with_sleep(sleeps.append)``."""
    return []


@pytest.fixture
def mock_transport() -> Callable[..., tuple[httpx.MockTransport, CallCounter]]:
    """Factory building a MockTransport from scripted outcomes."""

    def factory(*outcomes: Any) -> tuple[httpx.MockTransport, CallCounter]:
        counter = CallCounter(*outcomes)
        return httpx.MockTransport(counter), counter

    return factory


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces XDG path resolution, points XDG_CONFIG_HOME and XDG_DATA_HOME
    into tmp_path, clears REQKIT_* variables, and changes the working
    directory to tmp_path so no project config leaks in.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("reqkit.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["REQKIT_TIMEOUT", "REQKIT_RETRY"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
