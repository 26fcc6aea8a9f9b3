from __future__ import annotations
import re
from typing import Dict, Optional
from afinn import Afinn
from .models import SentimentResult, SentimentLabel
from .logger import get_logger

log = get_logger("madegg.sentiment")

TOKEN_RE = re.compile(r"[a-z']+")


def afinn_lexicon(language: str = "en") -> Dict[str, int]:
    """AFINN-165 word weights (-5..+5) as shipped with the afinn package."""
    words = {w: int(v) for w, v in Afinn(language=language)._dict.items()}
    log.info("Loaded AFINN lexicon (%s): %d entries", language, len(words))
    return words


LEXICON: Dict[str, int] = afinn_lexicon()


class SentimentScorer:
    """Sums per-word lexicon weights; the sign of the total picks the label."""

    def __init__(self, lexicon: Optional[Dict[str, int]] = None, extras: Optional[Dict[str, int]] = None):
        self.lexicon = dict(LEXICON if lexicon is None else lexicon)
        if extras:
            self.lexicon.update(extras)

    def score(self, text: str) -> SentimentResult:
        total = 0; words = []
        for token in TOKEN_RE.findall((text or "").lower()):
            weight = self.lexicon.get(token)
            if weight:
                total += weight; words.append(token)
        if total > 0:
            label = SentimentLabel.POSITIVE
        elif total < 0:
            label = SentimentLabel.NEGATIVE
        else:
            label = SentimentLabel.NEUTRAL
        return SentimentResult(label=label, score=total, words=words)


scorer = SentimentScorer()
