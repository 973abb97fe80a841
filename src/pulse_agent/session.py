"""In-memory conversation sessions (thread-safe, never persisted)."""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .context import AgentContext
from .message import Message, create_message
from .router import respond
from .summary import summarize

logger = logging.getLogger("pulse_agent.session")

OPENING_LINES = (
    (
        "Hey, I'm PulsePilot, your always-on growth strategist. "
        "I help scope high-impact campaigns for agencies in real time.",
        (),
    ),
    (
        "Tell me about the campaign you want to launch — goals, timeline, target audience, anything that "
        "keeps you up at night — and I'll map out how we'd tackle it.",
        ("starter",),
    ),
)


class EmptyMessageError(ValueError):
    """Raised when a visitor submits a blank message."""


class SessionClosedError(RuntimeError):
    """Raised when submitting to a conversation that has been closed."""


# -----------------------------
# Typing delay
# -----------------------------
@dataclass
class TypingPolicy:
    """Controls the simulated typing delay before a reply shows up."""
    per_char_ms: int = 18
    min_ms: int = 640
    max_ms: int = 1600

    def delay_ms(self, text: str) -> int:
        return min(self.max_ms, max(self.min_ms, len(text) * self.per_char_ms))


def typing_delay_ms(text: str, policy: Optional[TypingPolicy] = None) -> int:
    return (policy or TypingPolicy()).delay_ms(text)


# -----------------------------
# Pending reply
# -----------------------------
class PendingReply:
    """An agent reply waiting out its typing delay.

    The context change behind it has already been applied; delivering only
    appends the agent message. Delivery happens at most once, and a cancelled
    reply is never delivered.
    """

    def __init__(
        self,
        conversation: "Conversation",
        reply: str,
        tags: List[str],
        intent: str,
        delay_ms: int,
    ) -> None:
        self.conversation = conversation
        self.reply = reply
        self.tags = tags
        self.intent = intent
        self.delay_ms = delay_ms
        self.message: Optional[Message] = None
        self._cancelled = False
        self._timer: Optional[threading.Timer] = None

    @property
    def delivered(self) -> bool:
        return self.message is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def deliver(self) -> Optional[Message]:
        """Append the reply to the conversation; no-op if already settled."""
        return self.conversation._deliver(self)

    def cancel(self) -> bool:
        """Discard the reply. Returns False when it was already delivered."""
        timer = self._timer
        if timer is not None:
            timer.cancel()
        return self.conversation._cancel(self)

    def start(self, on_deliver: Optional[Callable[[Message], None]] = None) -> threading.Timer:
        """Deliver after ``delay_ms`` on a background timer."""

        def fire() -> None:
            message = self.deliver()
            if message is not None and on_deliver is not None:
                on_deliver(message)

        self._timer = threading.Timer(self.delay_ms / 1000.0, fire)
        self._timer.daemon = True
        self._timer.start()
        return self._timer


# -----------------------------
# Conversation
# -----------------------------
class Conversation:
    """One visitor's history and accumulated context."""

    def __init__(self, identity: str = "default", *, typing: Optional[TypingPolicy] = None) -> None:
        self.identity = identity
        self.typing = typing or TypingPolicy()
        self._history: List[Message] = [create_message("agent", text, tags) for text, tags in OPENING_LINES]
        self._context = AgentContext()
        self._pending: List[PendingReply] = []
        self._closed = False
        self._lock = threading.RLock()

    # --------- views ----------
    @property
    def history(self) -> List[Message]:
        with self._lock:
            return list(self._history)

    @property
    def context(self) -> AgentContext:
        return self._context

    @property
    def insights(self) -> List[str]:
        """Side-panel lines for the current context."""
        return summarize(self._context)

    @property
    def pending(self) -> List[PendingReply]:
        with self._lock:
            return list(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    # --------- core API ----------
    def submit(self, text: str) -> PendingReply:
        """Record a visitor message and prepare the agent's reply.

        The updated context is applied before this returns, so replies
        computed for later submissions always see earlier signals.
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise EmptyMessageError("Message cannot be empty.")

        with self._lock:
            if self._closed:
                raise SessionClosedError(f"Conversation {self.identity!r} is closed.")
            prior = list(self._history)
            result = respond(trimmed, prior, self._context)
            self._history.append(create_message("user", trimmed))
            self._context = result.updated_context
            pending = PendingReply(
                self,
                reply=result.reply,
                tags=result.tags,
                intent=result.intent,
                delay_ms=self.typing.delay_ms(trimmed),
            )
            self._pending.append(pending)

        logger.debug("[%s] %s reply queued (delay=%sms)", self.identity, result.intent, pending.delay_ms)
        return pending

    def close(self) -> int:
        """Close the conversation and discard undelivered replies."""
        with self._lock:
            self._closed = True
            outstanding = list(self._pending)
        for pending in outstanding:
            pending.cancel()
        if outstanding:
            logger.info("[%s] closed with %d pending replies discarded", self.identity, len(outstanding))
        return len(outstanding)

    # --------- internals ----------
    def _deliver(self, pending: PendingReply) -> Optional[Message]:
        with self._lock:
            if pending.delivered or pending.cancelled:
                return None
            message = create_message("agent", pending.reply, pending.tags)
            pending.message = message
            self._history.append(message)
            self._discard(pending)
        logger.debug("[%s] delivered %s reply", self.identity, pending.intent)
        return message

    def _cancel(self, pending: PendingReply) -> bool:
        with self._lock:
            if pending.delivered:
                return False
            pending._cancelled = True
            self._discard(pending)
            return True

    def _discard(self, pending: PendingReply) -> None:
        if pending in self._pending:
            self._pending.remove(pending)


# -----------------------------
# Registry
# -----------------------------
class SessionRegistry:
    """Identity -> Conversation map with optional LRU cap."""

    def __init__(self, *, max_sessions: Optional[int] = None, typing: Optional[TypingPolicy] = None) -> None:
        self.max_sessions = max_sessions
        self.typing = typing or TypingPolicy()
        self._sessions: "OrderedDict[str, Conversation]" = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, identity: str) -> Optional[Conversation]:
        with self._lock:
            convo = self._sessions.get(identity)
            if convo is not None:
                self._sessions.move_to_end(identity)
            return convo

    def get_or_create(self, identity: str) -> Conversation:
        with self._lock:
            convo = self.get(identity)
            if convo is None:
                convo = Conversation(identity, typing=self.typing)
                self._sessions[identity] = convo
                logger.info("Started conversation %r", identity)
                self._prune()
            return convo

    def drop(self, identity: str) -> bool:
        with self._lock:
            convo = self._sessions.pop(identity, None)
        if convo is None:
            return False
        convo.close()
        return True

    def identities(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())

    def _prune(self) -> None:
        if not self.max_sessions or self.max_sessions <= 0:
            return
        evicted: Dict[str, Conversation] = {}
        while len(self._sessions) > self.max_sessions:
            identity, convo = self._sessions.popitem(last=False)
            evicted[identity] = convo
        for identity, convo in evicted.items():
            convo.close()
            logger.info("Evicted least recently used conversation %r", identity)
