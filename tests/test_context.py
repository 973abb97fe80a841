from __future__ import annotations

import time

from pulse_agent.context import AgentContext, extract, merge_unique
from pulse_agent.matchers import MAX_SCAN_CHARS


def test_email_is_captured_and_last_one_wins(empty_context: AgentContext):
    ctx = extract("reach me at ana@example.com", empty_context)
    assert ctx.contact == "ana@example.com"

    ctx = extract("actually use ben.o@studio.example.org instead", ctx)
    assert ctx.contact == "ben.o@studio.example.org"


def test_contact_survives_messages_without_an_email(empty_context: AgentContext):
    ctx = extract("ana@example.com", empty_context)
    ctx = extract("sounds good", ctx)
    assert ctx.contact == "ana@example.com"


def test_channel_labels_accumulate_in_table_order(empty_context: AgentContext):
    ctx = extract("We run google ads and some seo", empty_context)
    assert ctx.channels == ("Paid Search", "Content & SEO")


def test_extraction_is_idempotent(empty_context: AgentContext):
    msg = "We run google ads and some seo"
    once = extract(msg, empty_context)
    twice = extract(msg, once)
    assert twice == once
    assert len(set(twice.channels)) == len(twice.channels)


def test_labels_never_shrink():
    ctx = AgentContext(channels=("Email & CRM",))
    ctx = extract("google ads", ctx)
    assert ctx.channels == ("Email & CRM", "Paid Search")

    ctx = extract("nothing relevant here", ctx)
    assert ctx.channels == ("Email & CRM", "Paid Search")


def test_goals_pain_points_and_traits():
    ctx = extract(
        "We need more leads but we're a small team; the brand should feel premium and trusted",
        AgentContext(),
    )
    assert ctx.goals == ("Lead Generation",)
    assert ctx.pain_points == ("Limited Resources",)
    assert ctx.brand_traits == ("Premium & Sophisticated", "Trusted & Expert")


def test_extract_does_not_mutate_input(empty_context: AgentContext):
    extract("google ads, $5k, ana@example.com", empty_context)
    assert empty_context == AgentContext()


def test_budget_keeps_symbol_and_unit(empty_context: AgentContext):
    assert extract("budget is $10k", empty_context).budget == "$10k"
    assert extract("we can do $5k/mo", empty_context).budget == "$5k/mo"
    assert extract("around 15,000 usd", empty_context).budget == "15,000 usd"


def test_budget_is_replaced_not_merged(empty_context: AgentContext):
    ctx = extract("budget is $10k", empty_context)
    ctx = extract("actually 20k", ctx)
    assert ctx.budget == "20k"


def test_budget_matches_any_number():
    # Stray numbers are read as budgets too.
    assert extract("call me at 555", AgentContext()).budget == "555"


def test_timeline_patterns():
    assert extract("launch in the next 6 weeks", AgentContext()).timeline == "next 6 weeks"
    assert extract("targeting Q3 2025", AgentContext()).timeline == "Q3 2025"
    assert extract("sometime next quarter", AgentContext()).timeline == "next quarter"
    assert extract("next   3   months", AgentContext()).timeline == "next 3 months"


def test_timeline_pattern_order():
    ctx = extract("either next quarter or within the next 2 months", AgentContext())
    assert ctx.timeline == "next 2 months"


def test_nothing_recognised_returns_equal_context(empty_context: AgentContext):
    assert extract("okay", empty_context) == empty_context
    assert extract("", empty_context) == empty_context


def test_has_signals_ignores_brand_traits():
    assert not AgentContext().has_signals
    assert not AgentContext(brand_traits=("Bold & Energetic",)).has_signals
    assert AgentContext(timeline="next quarter").has_signals


def test_merge_unique_keeps_existing_first():
    assert merge_unique(("b", "a"), ["a", "c", "c"]) == ("b", "a", "c")


def test_long_input_is_bounded():
    blob = "a" * 200_000 + " ana@example.com"
    start = time.monotonic()
    ctx = extract(blob, AgentContext())
    assert time.monotonic() - start < 5.0
    # Only the scan window is read.
    assert len(blob) > MAX_SCAN_CHARS
    assert ctx.contact is None


def test_to_dict_lists():
    data = extract("google ads", AgentContext()).to_dict()
    assert data["channels"] == ["Paid Search"]
    assert data["budget"] is None
