"""Reply templates.

Each ``compose_*`` function takes the already-enriched context and returns a
:class:`Composition`: the ordered text segments of the reply plus the tags
describing what kind of reply it is. Segments are joined with a blank line.
The wording of each conditional segment depends only on whether the
relevant context field is populated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .context import AgentContext
from .summary import summarize

SEGMENT_SEPARATOR = "\n\n"


@dataclass
class Composition:
    segments: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return SEGMENT_SEPARATOR.join(self.segments)


# -----------------------------
# Shared segments
# -----------------------------
def snapshot_segment(context: AgentContext, heading: str) -> List[str]:
    """Heading plus the momentum summary, or nothing when no signals exist yet."""
    lines = summarize(context)
    if not lines:
        return []
    return [heading + "\n" + "\n".join(lines)]


# -----------------------------
# Intent replies
# -----------------------------
def compose_thanks(context: AgentContext) -> Composition:
    segments = ["Any time — I'll keep refining this playbook as you feed me new signals."]
    segments += snapshot_segment(context, "Before we wrap, here's the current snapshot:")
    if context.contact:
        segments.append(
            "I can queue an intro to your account lead. "
            f"Want me to send a calendar block to {context.contact}?"
        )
    else:
        segments.append(
            "If you're ready for handoff, drop the best email and I'll spin up an intro thread with the growth team."
        )
    return Composition(segments, ["rapport"])


def compose_pricing(context: AgentContext) -> Composition:
    segments = [
        "We scope growth sprints against outcomes, not arbitrary retainers. "
        "Typical pods land between $7.5K–$18K/mo depending on how many specialists we deploy."
    ]
    if context.budget:
        segments.append(
            f"With a budget signal around {context.budget}, we'd spin up a modular squad "
            "focused on the fastest revenue unlocks."
        )
    else:
        segments.append(
            "If you share the monthly range you're comfortable with, I'll forecast the squad make-up "
            "and time to break-even."
        )
    segments.append("Want me to outline how that would break down across strategy, production, and optimization?")
    return Composition(segments, ["budget"])


def compose_services(context: AgentContext) -> Composition:
    segments = [
        "We operate as an embedded growth pod; think strategists, channel experts, and creative engineers "
        "working off the same dashboard.",
        "Core stack includes: lifecycle growth strategy, brand narrative crafting, full-funnel paid + organic "
        "campaigns, conversion design, and analytics/attribution.",
    ]
    if context.channels:
        segments.append(
            f"I'm already flagging {', '.join(context.channels)} as primary levers for you — "
            "want a deeper breakdown by channel?"
        )
    else:
        segments.append("Tell me the channels you care about most and I'll tailor the pod around them.")
    return Composition(segments, ["services"])


def compose_timeline(context: AgentContext) -> Composition:
    segments = [
        "Launch velocity is baked in. Discovery sync day 1, playbook draft inside 48h, "
        "experiments in market within the first 10 days."
    ]
    if context.timeline:
        segments.append(
            f"With {context.timeline} as the target window, we'd prioritize rapid creative sprints "
            "and a single source-of-truth dashboard for daily decisions."
        )
    else:
        segments.append(
            "Drop the exact timing you're working toward and I'll build the activation calendar "
            "backward from that milestone."
        )
    segments.append("Want me to surface the first three experiments we'd stand up?")
    return Composition(segments, ["timeline"])


def compose_performance(context: AgentContext) -> Composition:
    return Composition(
        [
            "Recent wins: +213% qualified pipeline for a B2B SaaS in 90 days, 4.2x MER for a DTC wellness "
            "brand, 38% lift in LTV after rebuilding lifecycle journeys.",
            "We benchmark success on three pillars (acquisition efficiency, conversion velocity, retention "
            "economics) and report in a board-ready format.",
            "Tell me the KPI your leadership obsesses over and I'll share the exact reporting cadence we'd deploy.",
        ],
        ["proof"],
    )


def compose_next_steps(context: AgentContext) -> Composition:
    segments = [
        "Next step is a 25-minute Alignment Lab where we validate goals, stack-rank experiments, "
        "and lock resourcing."
    ]
    if context.contact:
        segments.append(
            f"I can send an invite directly to {context.contact}. "
            "Does early next week work, or should I tee up alternative slots?"
        )
    else:
        segments.append("Drop the best email and preferred day/time windows, and I'll slot it instantly.")
    segments.append(
        "Ahead of that I'll package this chat into a shorthand brief so the human team walks in already calibrated."
    )
    return Composition(segments, ["handoff"])


def compose_greeting(context: AgentContext) -> Composition:
    return Composition(
        [
            "Great to connect. Consider me your on-call strategist — I'll keep iterating as you feed me more intel.",
            "What's the biggest growth unlock you're chasing right now?",
        ],
        ["rapport"],
    )


# -----------------------------
# Blueprint (fallback)
# -----------------------------
def build_blueprint(context: AgentContext) -> str:
    """Five-bullet campaign outline, filled from context where we can."""
    if context.goals or context.channels:
        lines = ["Here's how I'd architect the campaign to hit your targets:"]
    else:
        lines = ["I'll map a QuickStrike blueprint so you can see the moving pieces:"]

    if context.goals:
        lines.append(f"• Mission control: {', '.join(context.goals)}")
    else:
        lines.append("• Mission control: plug revenue leaks and create compounding growth")

    if context.channels:
        lines.append(
            f"• Channel mix: {', '.join(context.channels)} with creative built for platform-native performance"
        )
    else:
        lines.append(
            "• Channel mix: Paid social + lifecycle nurture + an always-on creative lab to feed performance"
        )

    if context.pain_points:
        lines.append(f"• Friction fix: {', '.join(context.pain_points)}")
    else:
        lines.append(
            "• Friction fix: tighten attribution, accelerate testing velocity, "
            "and build a revenue narrative leadership can stand behind"
        )

    if context.timeline:
        lines.append(f"• Speed to launch: kick-off deck in <48h, roadmap locked for {context.timeline}")
    else:
        lines.append("• Speed to launch: kick-off deck in <48h, MVP experiments in market within 10 days")

    if context.budget:
        lines.append(
            f"• Budget choreography: align {context.budget} into test/control pods "
            "so we can spotlight win rates fast"
        )
    else:
        lines.append(
            "• Budget choreography: modular test pods so every dollar reports back "
            "what worked, what didn't, and why"
        )

    return "\n".join(lines)


BUDGET_ASK = "Give me a budget guardrail and I'll orchestrate which levers we lean on first."
CONTACT_ASK = "Ready when you are to loop in a human. Drop an email and I'll prep the team with a tidy brief."


def compose_blueprint(context: AgentContext) -> Composition:
    composition = Composition([build_blueprint(context)])
    if not context.budget:
        composition.segments.append(BUDGET_ASK)
    if not context.contact:
        composition.segments.append(CONTACT_ASK)
    snapshot = snapshot_segment(context, "Signal tracker updated:")
    if snapshot:
        composition.tags.append("insight")
        composition.segments += snapshot
    return composition
