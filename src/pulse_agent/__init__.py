"""Scripted marketing-strategist responder.

The engine reads signals (goals, channels, pain points, brand traits, budget,
timeline, contact) out of a visitor's message, folds them into an immutable
context and answers with a templated reply.

Typical usage
-------------
from pulse_agent import AgentContext, respond
result = respond("We want more leads, budget is $10k", [], AgentContext())

or serve it over HTTP from the provided launcher:

python scripts/run_server.py --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

from .context import AgentContext, extract
from .message import Message, create_message
from .router import AgentReply, classify, respond
from .session import Conversation, SessionRegistry
from .summary import summarize

__all__ = [
    "AgentContext",
    "AgentReply",
    "Conversation",
    "Message",
    "SessionRegistry",
    "classify",
    "create_app",
    "create_message",
    "extract",
    "get_version",
    "respond",
    "summarize",
    "__version__",
]

# ---------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------
__version__ = "0.1.0"

def get_version() -> str:
    """Return the package version."""
    return __version__

# ---------------------------------------------------------------------
# App factory export (FastAPI is only needed for the HTTP surface)
# ---------------------------------------------------------------------
def create_app(*args, **kwargs):
    """Return a configured FastAPI application.

    This forwards to :func:`pulse_agent.server.create_app`; the import is
    deferred so the engine can be used without loading the web stack.
    """
    from .server import create_app as _create_app

    return _create_app(*args, **kwargs)
