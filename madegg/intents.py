from __future__ import annotations
from typing import Optional, Tuple, List
from .models import Intent, FeedbackType

AFFIRM_WORDS = {"yes", "y", "continue"}
DENY_WORDS = {"no", "n", "exit"}

# Evaluated top to bottom; the first rule with any substring hit wins.
INTENT_RULES: List[Tuple[Intent, Tuple[str, ...]]] = [
    (Intent.MENU, ("menu", "food", "eat", "burger", "tenders", "wings", "sides", "fries", "drinks", "1")),
    (Intent.HOURS, ("hour", "time", "open", "close", "schedule", "when", "2")),
    (Intent.LOCATION, ("location", "address", "where", "find", "map", "directions", "3")),
    (Intent.HELP, ("help", "4")),
]

# (pattern, branch) pairs, first substring hit wins. Overlaps resolve by position,
# so branch names go before the ordinals and "liffey"/"valley" before "shopping".
LOCATION_PATTERNS: List[Tuple[str, str]] = [
    ("millenium", "Millenium Walkway"),
    ("millennium", "Millenium Walkway"),
    ("walkway", "Millenium Walkway"),
    ("charlotte", "Charlotte Way"),
    ("liffey", "Liffey Valley Shopping Centre"),
    ("valley", "Liffey Valley Shopping Centre"),
    ("dundrum", "Dundrum Shopping Centre"),
    ("shopping", "Dundrum Shopping Centre"),
    ("1", "Millenium Walkway"),
    ("2", "Charlotte Way"),
    ("3", "Dundrum Shopping Centre"),
    ("4", "Liffey Valley Shopping Centre"),
]


def normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def classify(text: str) -> Intent:
    """Map lower-cased, trimmed text to an Intent.

    Yes/no vocabularies are exact matches and take precedence; the remaining
    intents are substring rules in MENU > HOURS > LOCATION > HELP order.
    """
    if text in AFFIRM_WORDS:
        return Intent.AFFIRM
    if text in DENY_WORDS:
        return Intent.DENY
    for intent, keywords in INTENT_RULES:
        if any(k in text for k in keywords):
            return intent
    return Intent.UNKNOWN


def match_location(text: str) -> Optional[str]:
    for pattern, branch in LOCATION_PATTERNS:
        if pattern in text:
            return branch
    return None


def match_feedback_type(text: str) -> Optional[FeedbackType]:
    if "complain" in text:
        return FeedbackType.COMPLAINT
    if "feedback" in text:
        return FeedbackType.FEEDBACK
    return None
