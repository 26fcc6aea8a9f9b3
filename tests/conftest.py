import os, sys, random
import pytest

BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE not in sys.path:
    sys.path.insert(0, BASE)

from madegg.flows import DialogueEngine
from madegg.storage import TicketStore
from madegg.tickets import TicketFactory


class RecordingNotifier:
    """Stands in for the mail queue; keeps every request it is handed."""
    def __init__(self):
        self.requests = []
    def dispatch(self, request):
        self.requests.append(request)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return TicketStore()


@pytest.fixture
def engine(store, notifier):
    return DialogueEngine(store=store, notifier=notifier, factory=TicketFactory(rng=random.Random(7)))


def run_script(engine, session, lines):
    return [engine.handle(line, session) for line in lines]
