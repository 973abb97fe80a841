"""Intent routing and the ``respond`` entry point.

Routes are evaluated top to bottom and the first predicate that accepts the
turn wins; nothing falls through once a route has matched. The blueprint
route accepts everything, so exactly one handler runs per message.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from .context import AgentContext, extract
from .matchers import INTENT_KEYWORDS, bounded, contains_any, find_budget
from .message import Message
from .replies import (
    Composition,
    compose_blueprint,
    compose_greeting,
    compose_next_steps,
    compose_performance,
    compose_pricing,
    compose_services,
    compose_thanks,
    compose_timeline,
)

logger = logging.getLogger("pulse_agent.router")


# -----------------------------
# Types
# -----------------------------
@dataclass(frozen=True)
class Turn:
    """What a route predicate gets to look at."""
    lowered: str
    history: Sequence[Message]
    context: AgentContext

    @property
    def prior_user_messages(self) -> int:
        return sum(1 for msg in self.history if msg.sender == "user")

    @property
    def is_initial_exchange(self) -> bool:
        return self.prior_user_messages <= 1

    @property
    def states_budget(self) -> bool:
        return find_budget(self.lowered) is not None


@dataclass(frozen=True)
class Route:
    name: str
    predicate: Callable[[Turn], bool]
    handler: Callable[[AgentContext], Composition]


@dataclass
class AgentReply:
    reply: str
    updated_context: AgentContext
    tags: List[str] = field(default_factory=list)
    intent: str = "blueprint"


# -----------------------------
# Route table
# -----------------------------
def keyword_route(group: str) -> Callable[[Turn], bool]:
    keywords = INTENT_KEYWORDS[group]

    def predicate(turn: Turn) -> bool:
        return contains_any(turn.lowered, keywords)

    predicate.__name__ = f"mentions_{group}"
    return predicate


def _asks_about_pricing(turn: Turn) -> bool:
    hits = [keyword for keyword in INTENT_KEYWORDS["pricing"] if keyword in turn.lowered]
    # "budget is $10k" hands us a figure; only "budget" without one is a question.
    if hits == ["budget"] and turn.states_budget:
        return False
    return bool(hits)


def _greets_early(turn: Turn) -> bool:
    # Greetings only count during the initial exchange.
    return contains_any(turn.lowered, INTENT_KEYWORDS["greeting"]) and turn.is_initial_exchange


def _always(turn: Turn) -> bool:
    return True


ROUTES: Tuple[Route, ...] = (
    Route("thanks", keyword_route("thanks"), compose_thanks),
    Route("pricing", _asks_about_pricing, compose_pricing),
    Route("services", keyword_route("services"), compose_services),
    Route("timeline", keyword_route("timeline"), compose_timeline),
    Route("performance", keyword_route("performance"), compose_performance),
    Route("next_steps", keyword_route("next_steps"), compose_next_steps),
    Route("greeting", _greets_early, compose_greeting),
    Route("blueprint", _always, compose_blueprint),
)


def route(turn: Turn, routes: Sequence[Route] = ROUTES) -> Route:
    """Return the first route whose predicate accepts ``turn``."""
    for candidate in routes:
        if candidate.predicate(turn):
            return candidate
    # Only reachable with a custom table that lacks a catch-all.
    return ROUTES[-1]


def classify(message: str, history: Sequence[Message] = ()) -> str:
    """Name of the route a message would take, without composing a reply."""
    turn = Turn(lowered=bounded(message).lower(), history=history, context=AgentContext())
    return route(turn).name


# -----------------------------
# Entry point
# -----------------------------
def respond(latest_message: str, history: Sequence[Message], context: AgentContext) -> AgentReply:
    """Extract signals from ``latest_message`` and compose the agent's answer.

    Parameters
    ----------
    latest_message : str
        The visitor's new message (callers reject blank input beforehand).
    history : Sequence[Message]
        Conversation so far, *not* including ``latest_message``.
    context : AgentContext
        Context accumulated before this message.

    Returns
    -------
    AgentReply
        Reply text, the new context, the reply tags and the route taken.
    """
    enriched = extract(latest_message, context)
    turn = Turn(lowered=bounded(latest_message).lower(), history=history, context=enriched)
    chosen = route(turn)
    composition = chosen.handler(enriched)
    logger.debug("Routed message to %s (tags=%s)", chosen.name, composition.tags)
    return AgentReply(
        reply=composition.text,
        updated_context=enriched,
        tags=list(composition.tags),
        intent=chosen.name,
    )
