"""Keyword tables and regex extractors used to read signals out of visitor text."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

# Matchers only look at this many leading characters of a message.
MAX_SCAN_CHARS = 4000


# -----------------------------
# Label tables
# -----------------------------
@dataclass(frozen=True)
class Matcher:
    """A label that fires when any of its keywords appears in the text."""
    label: str
    keywords: Tuple[str, ...]

    def matches(self, lowered: str) -> bool:
        return contains_any(lowered, self.keywords)


def _table(*rows: Tuple[str, Sequence[str]]) -> Tuple[Matcher, ...]:
    return tuple(Matcher(label, tuple(keywords)) for label, keywords in rows)


CHANNEL_MATCHERS = _table(
    ("Paid Search", ["paid search", "ppc", "sem", "google ads", "search ads", "adwords"]),
    ("Paid Social", ["facebook ads", "instagram ads", "paid social", "tiktok ads", "linkedin ads"]),
    ("Organic Social", ["organic social", "instagram", "tiktok content", "social content", "community"]),
    ("Content & SEO", ["seo", "search", "blog", "content marketing", "organic traffic"]),
    ("Email & CRM", ["email", "crm", "nurture", "flows", "automation"]),
    ("Creative Strategy", ["creative", "video", "design", "brand storytelling", "asset"]),
)

GOAL_MATCHERS = _table(
    ("Lead Generation", ["leads", "lead gen", "pipeline", "booking", "demo"]),
    ("E-commerce Revenue", ["sales", "roas", "conversion", "checkout", "cart"]),
    ("Brand Awareness", ["awareness", "visibility", "reach", "top of funnel"]),
    ("Product Launch", ["launch", "new product", "go to market", "gtm"]),
    ("Retention & Loyalty", ["retention", "lifetime value", "loyalty", "repeat"]),
)

PAIN_POINT_MATCHERS = _table(
    ("Underperforming Ads", ["low roi", "underperforming", "ads not working", "inefficient", "poor performance"]),
    ("Limited Resources", ["small team", "no time", "limited resources", "need support", "wearing many hats"]),
    ("Scaling Plateau", ["plateau", "stagnant", "flat growth", "need scale", "need to scale"]),
    ("Messaging Clarity", ["positioning", "messaging", "story", "brand voice", "branding issue"]),
)

BRAND_TRAIT_MATCHERS = _table(
    ("Bold & Energetic", ["bold", "energetic", "edgy", "fun", "playful"]),
    ("Premium & Sophisticated", ["premium", "luxury", "high-end", "sophisticated"]),
    ("Trusted & Expert", ["trusted", "expert", "authoritative", "credible"]),
    ("Community-Driven", ["community", "authentic", "inclusive", "human"]),
)


# -----------------------------
# Intent keyword groups
# -----------------------------
INTENT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "pricing": ("price", "cost", "budget"),
    "services": ("service", "offer", "capabilities", "what can you do", "expertise"),
    "timeline": ("timeline", "when", "launch", "deadline", "kickoff", "start"),
    "performance": ("roi", "results", "case study", "growth", "examples", "proof"),
    "thanks": ("thanks", "thank you", "appreciate"),
    "greeting": ("hi", "hello", "hey", "good morning", "good afternoon", "good evening"),
    "next_steps": ("next steps", "what next", "how do we start", "how do i start"),
}


# -----------------------------
# Free-form extractors
# -----------------------------
# Unit suffixes are listed longest first so "10k/mo" keeps its "/mo".
BUDGET_PATTERN: re.Pattern[str] = re.compile(
    r"\$?\s?(\d{1,3}(?:[,\s]\d{3})+|\d+)"
    r"(?:\s?(k/mo|k per month|k\+|k|per month|monthly|usd|dollars))?",
    re.IGNORECASE,
)

TIMELINE_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"next\s+\d+\s+(?:weeks?|months?)", re.IGNORECASE),
    re.compile(r"q[1-4]\s?20\d{2}", re.IGNORECASE),
    re.compile(r"(?:this|next)\s+(?:month|quarter|season)", re.IGNORECASE),
)

EMAIL_PATTERN: re.Pattern[str] = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)

_WS = re.compile(r"\s+")


def bounded(text: str) -> str:
    """Clip text to the scanning window."""
    return text[:MAX_SCAN_CHARS]


def normalize_whitespace(text: str) -> str:
    return _WS.sub(" ", text).strip()


def contains_any(lowered: str, keywords: Iterable[str]) -> bool:
    """True when any keyword is a substring of the (already lower-cased) text."""
    return any(keyword in lowered for keyword in keywords)


def match_labels(lowered: str, table: Sequence[Matcher]) -> List[str]:
    """Return every label in ``table`` whose keywords hit, in table order."""
    return [matcher.label for matcher in table if matcher.matches(lowered)]


def find_budget(text: str) -> Optional[str]:
    match = BUDGET_PATTERN.search(bounded(text))
    if not match:
        return None
    return normalize_whitespace(match.group(0))


def find_timeline(text: str) -> Optional[str]:
    scanned = bounded(text)
    for pattern in TIMELINE_PATTERNS:
        match = pattern.search(scanned)
        if match:
            return normalize_whitespace(match.group(0))
    return None


def find_contact(text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(bounded(text))
    return match.group(0) if match else None
