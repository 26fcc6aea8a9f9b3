import random
import re
import threading
import time

import pytest

from madegg.models import FeedbackData, FeedbackType, SentimentLabel, Step
from madegg.storage import TicketStore, SessionStore, ServiceRegistry
from madegg.tickets import TicketFactory, TicketError, assign_staff


def feedback(sentiment=SentimentLabel.POSITIVE, score=3):
    return FeedbackData(feedback_type=FeedbackType.FEEDBACK, location="Charlotte Way", message="Great burgers",
                        email="a@b.com", sentiment=sentiment, sentiment_score=score)


class FixedRandom(random.Random):
    def randrange(self, *args, **kwargs):
        return 42


def test_id_format_and_range():
    f = TicketFactory(rng=random.Random(1))
    for _ in range(200):
        m = re.fullmatch(r"T-(\d+)", f.new_id())
        assert m and 0 <= int(m.group(1)) < 10000


def test_create_copies_fields_and_assigns_staff():
    t = TicketFactory().create(feedback())
    assert (t.feedback_type, t.location, t.message, t.email) == (FeedbackType.FEEDBACK, "Charlotte Way", "Great burgers", "a@b.com")
    assert t.sentiment == SentimentLabel.POSITIVE and t.sentiment_score == 3
    assert t.assigned_staff == "Team Member"
    assert TicketFactory().create(feedback(SentimentLabel.NEGATIVE, -2)).assigned_staff == "Senior Manager"


def test_tickets_are_immutable():
    t = TicketFactory().create(feedback())
    with pytest.raises(Exception):
        t.email = "other@b.com"


@pytest.mark.parametrize("label,staff", [
    (SentimentLabel.NEGATIVE, "Senior Manager"),
    (SentimentLabel.NEUTRAL, "Team Member"),
    (SentimentLabel.POSITIVE, "Team Member"),
])
def test_assign_staff(label, staff):
    assert assign_staff(label) == staff


def test_create_from_request_scores_and_validates():
    f = TicketFactory()
    t = f.create_from_request("Complaint", "the fries were awful", "Dundrum Shopping Centre")
    resp = t.to_response()
    assert resp["status"] == "Ticket submitted successfully"
    assert resp["sentiment_label"] == "negative" and resp["sentiment_score"] == -3
    assert resp["staff_assigned"] == "Senior Manager"
    assert resp["ticket_id"] == t.id
    with pytest.raises(TicketError):
        f.create_from_request("praise", "hi")
    with pytest.raises(TicketError):
        f.create_from_request("feedback", "   ")


def test_duplicate_ids_are_kept_and_lookup_returns_latest():
    store = TicketStore()
    f = TicketFactory(rng=FixedRandom())
    first = store.add(f.create(feedback()))
    second = store.add(f.create(feedback(SentimentLabel.NEGATIVE, -3)))
    assert first.id == second.id == "T-42"
    assert len(store) == 2
    assert store.get("T-42") is second
    assert store.all() == [first, second]
    assert store.get("T-1") is None


def test_store_concurrent_inserts():
    store = TicketStore(); f = TicketFactory()
    def worker():
        for _ in range(50):
            store.add(f.create(feedback()))
    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads: t.start()
    for t in threads: t.join()
    assert len(store) == 400


def test_service_registry():
    reg = ServiceRegistry({"chatbot": 50051})
    reg.register("ticketing", 50052)
    assert reg.discover("chatbot") == {"port": 50051, "alive": True}
    assert reg.discover("ticketing")["port"] == 50052
    assert reg.discover("nope") is None
    assert set(reg.snapshot()) == {"chatbot", "ticketing"}


def test_session_checkout_runs_one_turn_at_a_time():
    sessions = SessionStore()
    order = []
    def turn(name):
        with sessions.checkout("s") as s:
            order.append(name + "-in")
            s.step = Step.AWAITING_EMAIL
            time.sleep(0.05)
            order.append(name + "-out")
            sessions.reset_session("s")
    threads = [threading.Thread(target=turn, args=(n,)) for n in ("a", "b")]
    for th in threads: th.start()
    for th in threads: th.join()
    assert [o.split("-")[1] for o in order] == ["in", "out", "in", "out"]
    # the reset made by the earlier holder is visible to the next one
    with sessions.checkout("s") as s:
        assert s.step == Step.NONE
