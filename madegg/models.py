from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from typing import List, Dict, Optional
from datetime import datetime, timezone


class Step(str, Enum):
    NONE = "NONE"
    AWAITING_FEEDBACK_TYPE = "AWAITING_FEEDBACK_TYPE"
    AWAITING_LOCATION = "AWAITING_LOCATION"
    AWAITING_MESSAGE = "AWAITING_MESSAGE"
    AWAITING_EMAIL = "AWAITING_EMAIL"
    AWAITING_CONTINUATION = "AWAITING_CONTINUATION"


class FeedbackType(str, Enum):
    FEEDBACK = "feedback"
    COMPLAINT = "complaint"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"; NEGATIVE = "negative"; NEUTRAL = "neutral"


class Intent(str, Enum):
    MENU = "MENU"
    HOURS = "HOURS"
    LOCATION = "LOCATION"
    HELP = "HELP"
    AFFIRM = "AFFIRM"
    DENY = "DENY"
    UNKNOWN = "UNKNOWN"


@dataclass
class SentimentResult:
    label: SentimentLabel
    score: int
    words: List[str] = field(default_factory=list)
    def to_dict(self) -> Dict:
        return {"label": self.label.value, "score": self.score, "words": list(self.words)}


@dataclass
class Session:
    """Dialogue position and the fields collected so far for one connection."""
    step: Step = Step.NONE
    feedback_type: Optional[FeedbackType] = None
    location: Optional[str] = None
    message: Optional[str] = None
    sentiment: Optional[SentimentLabel] = None
    sentiment_score: Optional[int] = None
    email: Optional[str] = None

    def clear(self) -> None:
        """Drop every collected field and return to the main menu."""
        self.step = Step.NONE
        self.feedback_type = None; self.location = None; self.message = None
        self.sentiment = None; self.sentiment_score = None; self.email = None

    def snapshot(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def restore(self, snap: Dict) -> None:
        for name, value in snap.items():
            setattr(self, name, value)


@dataclass(frozen=True)
class FeedbackData:
    feedback_type: FeedbackType
    location: Optional[str]
    message: str
    email: Optional[str]
    sentiment: SentimentLabel
    sentiment_score: int = 0


@dataclass(frozen=True)
class Ticket:
    id: str
    feedback_type: FeedbackType
    location: Optional[str]
    message: str
    email: Optional[str]
    sentiment: SentimentLabel
    assigned_staff: str
    sentiment_score: int = 0
    status: str = "OPEN"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict:
        d = asdict(self)
        d["feedback_type"] = self.feedback_type.value
        d["sentiment"] = self.sentiment.value
        d["created_at"] = self.created_at.isoformat()
        return d

    def to_response(self) -> Dict:
        return {
            "ticket_id": self.id,
            "status": "Ticket submitted successfully",
            "staff_assigned": self.assigned_staff,
            "sentiment_score": self.sentiment_score,
            "sentiment_label": self.sentiment.value,
        }


@dataclass(frozen=True)
class NotificationRequest:
    ticket: Ticket
