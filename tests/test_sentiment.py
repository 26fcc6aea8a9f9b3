from madegg.sentiment import SentimentScorer, LEXICON, scorer
from madegg.models import SentimentLabel


def test_labels_follow_the_sign_of_the_sum():
    assert scorer.score("great service").label == SentimentLabel.POSITIVE
    assert scorer.score("slow and rude").label == SentimentLabel.NEGATIVE
    assert scorer.score("I had the OG burger").label == SentimentLabel.NEUTRAL


def test_full_afinn_word_list_is_the_default():
    assert len(LEXICON) > 3000
    assert scorer.score("the staff were kind").label == SentimentLabel.POSITIVE
    assert scorer.score("sorry for the delay").label == SentimentLabel.NEGATIVE


def test_zero_sum_is_neutral():
    r = scorer.score("good burger, bad fries")
    assert r.score == 0
    assert r.label == SentimentLabel.NEUTRAL
    assert r.words == ["good", "bad"]


def test_numeric_score_and_case_insensitivity():
    assert scorer.score("GREAT, Great, great!").score == 9
    assert scorer.score("Terrible").score == -3


def test_deterministic():
    text = "lovely staff but the fries were cold"
    assert scorer.score(text) == scorer.score(text)


def test_swappable_lexicon_and_extras():
    custom = SentimentScorer(lexicon={"meh": -1})
    assert custom.score("great").label == SentimentLabel.NEUTRAL
    assert custom.score("meh").label == SentimentLabel.NEGATIVE
    boosted = SentimentScorer(extras={"eggcellent": 2})
    assert boosted.score("eggcellent").score == 2
    assert scorer.score("eggcellent").score == 0


def test_empty_text():
    r = scorer.score("")
    assert (r.label, r.score, r.words) == (SentimentLabel.NEUTRAL, 0, [])
