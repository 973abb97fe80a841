from __future__ import annotations

from pulse_agent.context import AgentContext
from pulse_agent.summary import summarize


def test_empty_context_has_no_lines():
    assert summarize(AgentContext()) == []


def test_single_goal_gives_one_line():
    lines = summarize(AgentContext(goals=("Lead Generation",)))
    assert len(lines) == 1
    assert "Lead Generation" in lines[0]


def test_line_order_and_joining():
    ctx = AgentContext(
        goals=("Lead Generation", "Brand Awareness"),
        channels=("Paid Search",),
        pain_points=("Scaling Plateau",),
        budget="$10k",
        timeline="Q3 2025",
        contact="joe@acme.com",
    )
    lines = summarize(ctx)
    assert len(lines) == 6
    assert "Lead Generation, Brand Awareness" in lines[0]
    assert "Paid Search" in lines[1]
    assert "Scaling Plateau" in lines[2]
    assert "$10k" in lines[3]
    assert "Q3 2025" in lines[4]
    assert "joe@acme.com" in lines[5]


def test_brand_traits_are_not_listed():
    assert summarize(AgentContext(brand_traits=("Bold & Energetic",))) == []
