"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from pulse_agent.context import AgentContext  # noqa: E402
from pulse_agent.message import create_message  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the root directory of the project."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Shipped default config."""
    return project_root / "config" / "default.yaml"


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    import os

    for var in list(os.environ):
        if var == "PULSE_AGENT_CONFIG" or var.startswith("PULSE_AGENT__"):
            monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def empty_context() -> AgentContext:
    return AgentContext()


@pytest.fixture
def user_turns():
    """Build a history holding ``n`` prior user messages."""
    def _make(n: int):
        history = []
        for i in range(n):
            history.append(create_message("user", f"message {i}"))
            history.append(create_message("agent", f"reply {i}"))
        return history
    return _make
