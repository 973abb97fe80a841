from __future__ import annotations

import pytest

from pulse_agent.context import AgentContext
from pulse_agent.matchers import CHANNEL_MATCHERS, contains_any, match_labels
from pulse_agent.replies import BUDGET_ASK, CONTACT_ASK, Composition
from pulse_agent.router import ROUTES, Route, Turn, classify, respond, route


def test_route_priority_order():
    assert [r.name for r in ROUTES] == [
        "thanks",
        "pricing",
        "services",
        "timeline",
        "performance",
        "next_steps",
        "greeting",
        "blueprint",
    ]


@pytest.mark.parametrize(
    "message, expected",
    [
        ("What does it cost?", "pricing"),
        ("What's your price for a retainer?", "pricing"),
        ("What services do you offer?", "services"),
        ("When can we kick things off?", "timeline"),
        ("Do you have a case study?", "performance"),
        ("What are the next steps?", "next_steps"),
        ("Hello there", "greeting"),
        ("We sell shoes", "blueprint"),
    ],
)
def test_classify(message, expected):
    assert classify(message) == expected


def test_thanks_beats_pricing():
    assert classify("Thank you! What would this cost?") == "thanks"
    result = respond("Thank you! What would this cost?", [], AgentContext())
    assert result.intent == "thanks"
    assert result.tags == ["rapport"]


def test_stated_budget_is_not_a_pricing_question():
    assert classify("our budget is $8k") == "blueprint"
    assert classify("what budget do you need?") == "pricing"
    assert classify("budget is $8k, what's the price?") == "pricing"


def test_greeting_only_during_initial_exchange(user_turns):
    assert classify("Hello there", user_turns(0)) == "greeting"
    assert classify("Hello there", user_turns(1)) == "greeting"
    assert classify("Hello there", user_turns(2)) == "blueprint"


def test_agent_messages_do_not_count_towards_initial_exchange(user_turns):
    history = user_turns(1)
    agent_only = [m for m in history if m.sender == "agent"] * 5
    assert classify("hey", agent_only) == "greeting"


def test_route_falls_back_when_nothing_matches():
    never = Route("never", lambda turn: False, lambda ctx: Composition())
    turn = Turn(lowered="anything", history=(), context=AgentContext())
    assert route(turn, routes=[never]).name == "blueprint"


def test_keyword_predicates():
    assert contains_any("we want paid search", ["ppc", "paid search"])
    assert not contains_any("", ["ppc"])
    assert match_labels("email automation and video", CHANNEL_MATCHERS) == ["Email & CRM", "Creative Strategy"]


def test_respond_threads_context_forward():
    first = respond("We run google ads", [], AgentContext())
    second = respond("and want more leads", [], first.updated_context)
    assert second.updated_context.channels == ("Paid Search",)
    assert second.updated_context.goals == ("Lead Generation",)


def test_respond_end_to_end():
    result = respond(
        "We want to boost leads, budget is $10k, email me at joe@acme.com",
        [],
        AgentContext(),
    )
    ctx = result.updated_context
    assert "Lead Generation" in ctx.goals
    assert ctx.budget == "$10k"
    assert ctx.contact == "joe@acme.com"

    assert result.intent == "blueprint"
    assert result.reply
    assert "Signal tracker updated:" in result.reply
    assert "joe@acme.com" in result.reply
    assert BUDGET_ASK not in result.reply
    assert CONTACT_ASK not in result.reply
    assert result.tags == ["insight"]


def test_respond_pricing_uses_fresh_budget():
    result = respond("What does it cost? We have about $6k/mo", [], AgentContext())
    assert result.intent == "pricing"
    assert "$6k/mo" in result.reply
    assert result.tags == ["budget"]
