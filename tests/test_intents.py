import pytest

from madegg.intents import classify, match_location, match_feedback_type, normalize, LOCATION_PATTERNS
from madegg.models import Intent, FeedbackType
from madegg.config import LOCATIONS


@pytest.mark.parametrize("text,intent", [
    ("menu", Intent.MENU),
    ("what time do you close", Intent.HOURS),
    ("directions please", Intent.LOCATION),
    ("help", Intent.HELP),
    ("4", Intent.HELP),
    ("yes", Intent.AFFIRM),
    ("continue", Intent.AFFIRM),
    ("n", Intent.DENY),
    ("exit", Intent.DENY),
    ("blah", Intent.UNKNOWN),
    ("", Intent.UNKNOWN),
])
def test_classify(text, intent):
    assert classify(text) == intent


def test_rule_priority_menu_beats_hours_beats_location():
    assert classify("menu hours where") == Intent.MENU
    assert classify("opening hours and address") == Intent.HOURS
    assert classify("help me find you") == Intent.LOCATION


def test_yes_no_are_exact_tokens():
    assert classify("yes please") != Intent.AFFIRM
    assert classify("nope") != Intent.DENY


def test_normalize():
    assert normalize("  Charlotte WAY \n") == "charlotte way"
    assert normalize(None) == ""


@pytest.mark.parametrize("pattern,branch", LOCATION_PATTERNS)
def test_every_synonym_resolves(pattern, branch):
    assert match_location(pattern) == branch


@pytest.mark.parametrize("name", LOCATIONS)
def test_full_branch_names_resolve_to_themselves(name):
    assert match_location(normalize(name)) == name


def test_overlaps_resolve_by_list_position():
    # "shopping" alone is Dundrum, but the Liffey synonyms are listed first
    assert match_location("the shopping centre one") == "Dundrum Shopping Centre"
    assert match_location("liffey valley shopping") == "Liffey Valley Shopping Centre"
    # names win over ordinals
    assert match_location("charlotte, unit 1") == "Charlotte Way"
    assert match_location("nowhere") is None


def test_match_feedback_type():
    assert match_feedback_type("complaint") == FeedbackType.COMPLAINT
    assert match_feedback_type("i have feedback") == FeedbackType.FEEDBACK
    assert match_feedback_type("something else") is None
