"""Momentum summary: the populated signals of a context as display lines."""
from __future__ import annotations

from typing import List

from .context import AgentContext


def summarize(context: AgentContext) -> List[str]:
    """Render goals, channels, pain points, budget, timeline and contact (in that order)."""
    lines: List[str] = []
    if context.goals:
        lines.append(f"📈 Goals locked: {', '.join(context.goals)}")
    if context.channels:
        lines.append(f"📡 Channels in play: {', '.join(context.channels)}")
    if context.pain_points:
        lines.append(f"🚧 Friction points: {', '.join(context.pain_points)}")
    if context.budget:
        lines.append(f"💰 Budget signal: {context.budget}")
    if context.timeline:
        lines.append(f"⏱ Timeline flag: {context.timeline}")
    if context.contact:
        lines.append(f"🤝 Handoff ready at {context.contact}")
    return lines
