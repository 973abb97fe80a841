from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

SENDERS = ("user", "agent")


@dataclass(frozen=True)
class Message:
    """A single conversation turn. Never mutated once created."""

    id: str              # "<sender>-<hex>"
    sender: str          # "user" | "agent"
    text: str
    timestamp: int       # epoch milliseconds

    # Semantic labels attached to agent replies ("budget", "insight", ...)
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sender": self.sender,
            "text": self.text,
            "timestamp": self.timestamp,
            "tags": list(self.tags),
        }


def create_message(sender: str, text: str, tags: Optional[Iterable[str]] = None) -> Message:
    if sender not in SENDERS:
        raise ValueError(f"sender must be one of {SENDERS}, got {sender!r}")
    return Message(
        id=f"{sender}-{uuid.uuid4().hex}",
        sender=sender,
        text=text,
        timestamp=int(time.time() * 1000),
        tags=tuple(tags or ()),
    )
