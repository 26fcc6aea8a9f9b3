from __future__ import annotations
import queue
import smtplib
import threading
from email.message import EmailMessage
from typing import Optional
from .models import NotificationRequest, Ticket
from .config import (
    SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, NOTIFY_TO, NOTIFY_FROM,
    RESPONSE_WINDOW, DEFAULT_RESPONSE_WINDOW,
)
from .logger import get_logger

log = get_logger("madegg.notifications")

SENTIMENT_EMOJI = {"positive": "😊", "negative": "😞", "neutral": "😐"}


def compose_ticket_email(ticket: Ticket, sender: str = NOTIFY_FROM, to: str = NOTIFY_TO) -> EmailMessage:
    label = ticket.sentiment.value
    emoji = SENTIMENT_EMOJI.get(label, "")
    kind = ticket.feedback_type.value
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = f"{emoji} New {kind} from {ticket.location} ({ticket.id})"
    msg.set_content(
        f"New customer {kind} received:\n\n"
        f"Ticket: {ticket.id}\n"
        f"Location: {ticket.location}\n"
        f"Message: {ticket.message}\n"
        f"Customer Email: {ticket.email}\n"
        f"Sentiment: {label} {emoji}\n"
        f"Assigned to: {ticket.assigned_staff}\n\n"
        f"Please respond within {RESPONSE_WINDOW.get(label, DEFAULT_RESPONSE_WINDOW)}."
    )
    return msg


class LogMailer:
    def send(self, msg: EmailMessage) -> None:
        log.info("Ticket email (not sent, no SMTP host configured): %s", msg["Subject"])


class SmtpMailer:
    def __init__(self, host: str, port: int = 465, user: Optional[str] = None, password: Optional[str] = None):
        self.host = host; self.port = port; self.user = user; self.password = password

    def send(self, msg: EmailMessage) -> None:
        with smtplib.SMTP_SSL(self.host, self.port, timeout=30) as smtp:
            if self.user:
                smtp.login(self.user, self.password or "")
            smtp.send_message(msg)
        log.info("Ticket email sent: %s", msg["Subject"])


def default_mailer():
    if SMTP_HOST:
        return SmtpMailer(SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD)
    return LogMailer()


class Notifier:
    """Fire-and-forget delivery of ticket notifications.

    `dispatch` only enqueues; a daemon worker drains the queue and hands each
    request to the mailer. Mailer failures are logged and dropped, so neither a
    slow nor a broken mail transport can hold up a dialogue.
    """

    def __init__(self, mailer=None):
        self.mailer = mailer or default_mailer()
        self._queue: "queue.Queue[NotificationRequest]" = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(target=self._run, name="madegg-notifier", daemon=True)
                self._worker.start()

    def dispatch(self, request: NotificationRequest) -> None:
        self._ensure_worker()
        self._queue.put_nowait(request)
        log.info("Notification queued for ticket %s", request.ticket.id)

    def _run(self) -> None:
        while True:
            request = self._queue.get()
            try:
                self.mailer.send(compose_ticket_email(request.ticket))
            except Exception as e:
                log.error("Error sending ticket email for %s: %s", request.ticket.id, e)
            finally:
                self._queue.task_done()

    def drain(self) -> None:
        """Block until every queued notification has been attempted."""
        self._queue.join()
