from __future__ import annotations
import random
from typing import Optional
from .models import FeedbackData, FeedbackType, SentimentLabel, Ticket
from .config import STAFF_NEGATIVE, STAFF_DEFAULT
from .sentiment import SentimentScorer, scorer as default_scorer
from .logger import get_logger

log = get_logger("madegg.tickets")


class TicketError(ValueError):
    """Raised when a direct ticket request carries an unusable field."""


def assign_staff(sentiment: SentimentLabel) -> str:
    return STAFF_NEGATIVE if sentiment == SentimentLabel.NEGATIVE else STAFF_DEFAULT


class TicketFactory:
    # Ids are not checked for uniqueness; two tickets may share an id.
    def __init__(self, rng: Optional[random.Random] = None, scorer: Optional[SentimentScorer] = None):
        self.rng = rng or random.Random()
        self.scorer = scorer or default_scorer

    def new_id(self) -> str:
        return f"T-{self.rng.randrange(10000)}"

    def create(self, data: FeedbackData) -> Ticket:
        t = Ticket(
            id=self.new_id(), feedback_type=data.feedback_type, location=data.location,
            message=data.message, email=data.email, sentiment=data.sentiment,
            sentiment_score=data.sentiment_score, assigned_staff=assign_staff(data.sentiment),
        )
        log.info("Ticket created %s: %s (%s) at %s -> %s", t.id, t.feedback_type.value.upper(), t.sentiment.value, t.location, t.assigned_staff)
        return t

    def create_from_request(self, feedback_type: str, message: str, location: Optional[str] = None, email: Optional[str] = None) -> Ticket:
        """Build a ticket outside the dialogue: score the message here instead of per step."""
        try:
            ftype = FeedbackType((feedback_type or "").strip().lower())
        except ValueError:
            raise TicketError(f"Invalid feedback type: {feedback_type!r}")
        if not (message or "").strip():
            raise TicketError("Message is required")
        sr = self.scorer.score(message)
        return self.create(FeedbackData(feedback_type=ftype, location=location, message=message,
                                        email=email, sentiment=sr.label, sentiment_score=sr.score))
