from __future__ import annotations
import re
from typing import Dict, Any, Optional
from .models import Session, Step, Intent, FeedbackData, NotificationRequest, SentimentLabel, FeedbackType
from .intents import classify, normalize, match_location, match_feedback_type
from .sentiment import SentimentScorer, scorer as default_scorer
from .tickets import TicketFactory
from .storage import TicketStore
from .notifications import Notifier, SENTIMENT_EMOJI
from .config import LOCATIONS
from .logger import get_logger

log = get_logger("madegg.flows")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

OPTIONS = "1. 🍔 Menu\n2. 🕒 Hours\n3. 📍 Location\n4. 📩 Help (Feedback and Complaint)\n\nWhat would you like?"
GREETING = "Hello! I can help with:\n\n" + OPTIONS
DEFAULT_MENU = "I can help with:\n\n" + OPTIONS
CONTINUE_MENU = "Great! What else can I help you with?\n\n" + OPTIONS
TERMINAL_MESSAGE = "Thank you for chatting with us! Have a great day!"
RETRY_MESSAGE = "Sorry, something went wrong. Please try again."
FOLLOW_UP = "Would you like to know our menu, hours, location or help (feedback or complaint)?"
LOCATION_LIST = "\n".join(f"{i}. {name}" for i, name in enumerate(LOCATIONS, start=1))

MENU_INFO = (
    "Our delicious menu includes:\n\n"
    "🍔 Chicken Burgers\n"
    "OG €14.00\nNashville Hot Chick €14.95\nWild Thing €14.95\nHoney Baby €14.95\n"
    "GOAT €14.95\nHeart Breaker €14.50\nSide Chick €14.00\n\n"
    "🍗 Tenders\n"
    "Nashville Tender €10.95\nLove Me Ranch Tender €10.95\nLove Me My Way €10.95\n"
    "Love Me Sweetie €10.95\nDouble Stack €19.95\n\n"
    "🍟 Sides\n"
    "Mac And Cheese €9.95\nFries €5.95\nTator Tots €5.95\nLoaded Fries/Tots €9.95\nCrack Fries/Tots €9.95\n\n"
    "🥤 Drinks\n"
    "Coke €3.10\nCoke Zero/Diet €3.00\nFanta Orange/Lemon €3.00\n7UP €3.00\n\n" + FOLLOW_UP
)
HOURS_INFO = "🕒 Our opening hours:\n\nSunday-Thursday: 12pm-9pm\nFriday-Saturday: 12pm-10pm\n\n" + FOLLOW_UP
LOCATION_INFO = "📍 Find us at:\n\n" + "\n".join(LOCATIONS) + "\n\n" + FOLLOW_UP

INFO_BLOCKS = {Intent.MENU: MENU_INFO, Intent.HOURS: HOURS_INFO, Intent.LOCATION: LOCATION_INFO}


def _reply(message: str, *actions: str, ticket_id: Optional[str] = None) -> Dict[str, Any]:
    return {"message": message, "ticket_id": ticket_id, "actions": list(actions)}


# --- Continuation after a submitted ticket ---
def flow_continuation(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.AWAITING_CONTINUATION:
        return {}
    intent = classify(clean)
    if intent == Intent.AFFIRM:
        session.step = Step.NONE
        return _reply(CONTINUE_MENU, "SHOW_MENU")
    if intent == Intent.DENY:
        session.clear()
        return _reply(TERMINAL_MESSAGE, "END_CHAT")
    return _reply("Please answer with 'yes' to continue chatting or 'no' to end the conversation.", "ASK_CONTINUE")


# --- Entry into the feedback flow from the main menu ---
def flow_feedback_entry(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.NONE:
        return {}
    if clean in {"feedback", "complaint"}:
        session.feedback_type = FeedbackType(clean)
        session.step = Step.AWAITING_LOCATION
        return _reply("Please select a location:\n\n" + LOCATION_LIST, "ASK_LOCATION")
    if classify(clean) == Intent.HELP:
        session.step = Step.AWAITING_FEEDBACK_TYPE
        return _reply("Would you like to provide feedback or report a complaint?", "ASK_FEEDBACK_TYPE")
    return {}


def flow_feedback_type(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.AWAITING_FEEDBACK_TYPE:
        return {}
    ftype = match_feedback_type(clean)
    if ftype:
        session.feedback_type = ftype
        session.step = Step.AWAITING_LOCATION
        return _reply("Please select a location:\n\n" + LOCATION_LIST, "ASK_LOCATION")
    if classify(clean) == Intent.DENY:
        session.clear()
        return _reply(DEFAULT_MENU, "SHOW_MENU")
    return _reply("Please type 'feedback' or 'complaint' so I can route it to the right team.", "ASK_FEEDBACK_TYPE")


def flow_location(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.AWAITING_LOCATION:
        return {}
    branch = match_location(clean)
    if not branch:
        return _reply("Please select a valid location:\n\n" + LOCATION_LIST, "ASK_LOCATION")
    session.location = branch
    session.step = Step.AWAITING_MESSAGE
    return _reply(f"Please describe your {session.feedback_type.value} in detail:", "ASK_MESSAGE")


# --- Message body with sentiment ---
def flow_message(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.AWAITING_MESSAGE:
        return {}
    if not clean:
        return _reply(f"Please describe your {session.feedback_type.value} in detail:", "ASK_MESSAGE")
    sr = engine.scorer.score(text)
    # the body is kept exactly as the customer typed it
    session.message = text
    session.sentiment = sr.label
    session.sentiment_score = sr.score
    session.step = Step.AWAITING_EMAIL
    log.info("Feedback message scored %s (%s) words=%s", sr.label.value, sr.score, sr.words)
    response = "Thank you for your message. "
    if sr.label == SentimentLabel.NEGATIVE:
        response += "We're sorry to hear about your experience. "
    elif sr.label == SentimentLabel.POSITIVE:
        response += "We're happy you enjoyed your visit! "
    return _reply(response + "Could you please provide your email so our manager can follow up?", "ASK_EMAIL")


# --- Email collection and ticket commit ---
def flow_email(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.AWAITING_EMAIL:
        return {}
    if not EMAIL_RE.match(clean):
        return _reply("That doesn't look like a valid email. Please try again:", "ASK_EMAIL")
    session.email = clean
    data = FeedbackData(
        feedback_type=session.feedback_type, location=session.location, message=session.message,
        email=session.email, sentiment=session.sentiment, sentiment_score=session.sentiment_score or 0,
    )
    t = engine.commit(data)
    session.clear()
    session.step = Step.AWAITING_CONTINUATION
    emoji = SENTIMENT_EMOJI.get(t.sentiment.value, "")
    summary = (
        f"📨 Ticket #{t.id} submitted.\n"
        f"🗂️ Type: {t.feedback_type.value}\n"
        f"📍 Location: {t.location}\n"
        f"📝 Message: {t.message}\n"
        f"📧 Email: {t.email}\n"
        f"Sentiment: {t.sentiment.value} {emoji}\n"
        f"Assigned to: {t.assigned_staff}\n\n"
        f"✅ Your {t.feedback_type.value} has been sent to the branch manager. They'll contact you soon.\n\n"
        "Would you like to continue chatting? (yes/no)"
    )
    return _reply(summary, "CREATE_TICKET", "NOTIFY_STAFF", "ASK_CONTINUE", ticket_id=t.id)


# --- Canned information from the main menu ---
def flow_info(engine: "DialogueEngine", session: Session, text: str, clean: str) -> Dict[str, Any]:
    if session.step != Step.NONE:
        return {}
    block = INFO_BLOCKS.get(classify(clean))
    if not block:
        return {}
    return _reply(block, "SHOW_INFO")


FLOWS = (
    flow_continuation,
    flow_feedback_entry,
    flow_feedback_type,
    flow_location,
    flow_message,
    flow_email,
    flow_info,
)


class DialogueEngine:
    """Runs one inbound message against a Session and returns one reply.

    Collaborators are injected so that every connection shares the same ticket
    store and notifier while keeping its own Session.
    """

    def __init__(self, store: Optional[TicketStore] = None, notifier: Optional[Notifier] = None,
                 factory: Optional[TicketFactory] = None, scorer: Optional[SentimentScorer] = None):
        self.store = store if store is not None else TicketStore()
        self.notifier = notifier or Notifier()
        self.scorer = scorer or default_scorer
        self.factory = factory or TicketFactory(scorer=self.scorer)

    def commit(self, data: FeedbackData):
        return self.publish(self.factory.create(data))

    def publish(self, ticket):
        """Store a finished ticket and queue its notification without waiting on it."""
        t = self.store.add(ticket)
        try:
            self.notifier.dispatch(NotificationRequest(ticket=t))
        except Exception:
            # the ticket is already stored; a notification problem must not undo it
            log.exception("Notification dispatch failed for ticket %s", t.id)
        return t

    def respond(self, text: Optional[str], session: Session) -> Dict[str, Any]:
        clean = normalize(text)
        raw = text or ""
        snap = session.snapshot()
        try:
            for flow in FLOWS:
                result = flow(self, session, raw, clean)
                if result:
                    log.info("Flow %s -> step=%s actions=%s", flow.__name__, session.step.value, result.get("actions"))
                    return result
            return _reply(DEFAULT_MENU, "SHOW_MENU")
        except Exception:
            log.exception("Dialogue step failed at %s; restoring session", snap.get("step"))
            session.restore(snap)
            return _reply(RETRY_MESSAGE, "RETRY")

    def handle(self, text: Optional[str], session: Session) -> str:
        return self.respond(text, session)["message"]
