"""Accumulated conversation context and the signal extractor that grows it."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from .matchers import (
    BRAND_TRAIT_MATCHERS,
    CHANNEL_MATCHERS,
    GOAL_MATCHERS,
    PAIN_POINT_MATCHERS,
    bounded,
    find_budget,
    find_contact,
    find_timeline,
    match_labels,
)


# -----------------------------
# Data model
# -----------------------------
@dataclass(frozen=True)
class AgentContext:
    """
    Everything the agent has learned about the visitor so far.

    Fields:
        goals / channels / brand_traits / pain_points:
            labels from the matcher tables, in the order they were first seen.
            These only ever grow.
        budget / timeline / contact:
            the most recently detected raw value (last one wins).
    """
    goals: Tuple[str, ...] = ()
    channels: Tuple[str, ...] = ()
    brand_traits: Tuple[str, ...] = ()
    pain_points: Tuple[str, ...] = ()
    budget: Optional[str] = None
    timeline: Optional[str] = None
    contact: Optional[str] = None

    @property
    def has_signals(self) -> bool:
        """True when anything shown in the momentum snapshot is populated."""
        return bool(
            self.goals
            or self.channels
            or self.pain_points
            or self.budget
            or self.timeline
            or self.contact
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goals": list(self.goals),
            "channels": list(self.channels),
            "brand_traits": list(self.brand_traits),
            "pain_points": list(self.pain_points),
            "budget": self.budget,
            "timeline": self.timeline,
            "contact": self.contact,
        }


# -----------------------------
# Extraction
# -----------------------------
def merge_unique(current: Iterable[str], additions: Iterable[str]) -> Tuple[str, ...]:
    """Existing items first, then new ones; duplicates dropped."""
    return tuple(dict.fromkeys([*current, *additions]))


def extract(message: str, context: AgentContext) -> AgentContext:
    """Fold the signals found in ``message`` into a new context.

    Never raises; a message with nothing recognisable returns an equal context.
    """
    lowered = bounded(message).lower()

    return replace(
        context,
        channels=merge_unique(context.channels, match_labels(lowered, CHANNEL_MATCHERS)),
        goals=merge_unique(context.goals, match_labels(lowered, GOAL_MATCHERS)),
        pain_points=merge_unique(context.pain_points, match_labels(lowered, PAIN_POINT_MATCHERS)),
        brand_traits=merge_unique(context.brand_traits, match_labels(lowered, BRAND_TRAIT_MATCHERS)),
        budget=find_budget(message) or context.budget,
        timeline=find_timeline(message) or context.timeline,
        contact=find_contact(message) or context.contact,
    )
