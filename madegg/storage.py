from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import List, Dict, Optional, Iterator
from .models import Ticket, Session
from .config import SERVICE_PORTS
from .logger import get_logger

log = get_logger("madegg.storage")


class TicketStore:
    """Append-only ticket registry shared by every connection.

    Every committed ticket is kept in insertion order. Ids are not unique, so
    lookups by id return the most recent ticket carrying that id.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tickets: List[Ticket] = []
        self._by_id: Dict[str, Ticket] = {}

    def add(self, ticket: Ticket) -> Ticket:
        with self._lock:
            if ticket.id in self._by_id:
                log.warning("Ticket id %s reused; earlier ticket remains in the list only", ticket.id)
            self._tickets.append(ticket)
            self._by_id[ticket.id] = ticket
        return ticket

    def get(self, ticket_id: str) -> Optional[Ticket]:
        with self._lock:
            return self._by_id.get(ticket_id)

    def all(self) -> List[Ticket]:
        with self._lock:
            return list(self._tickets)

    def clear(self) -> None:
        with self._lock:
            self._tickets.clear(); self._by_id.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickets)


class SessionStore:
    """Sessions for the request/response facade, keyed by caller-chosen id.

    Requests sharing an id are run one at a time through `checkout`.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.sessions: Dict[str, Session] = {}
        self._turns: Dict[str, threading.Lock] = {}

    def get_session(self, session_id: str) -> Session:
        with self._lock:
            return self.sessions.setdefault(session_id, Session())

    def reset_session(self, session_id: str) -> None:
        with self._lock:
            self.sessions.pop(session_id, None)

    @contextmanager
    def checkout(self, session_id: str) -> Iterator[Session]:
        with self._lock:
            turn = self._turns.setdefault(session_id, threading.Lock())
        with turn:
            # fetched under the turn lock so a reset by the previous holder is seen
            yield self.get_session(session_id)


class ServiceRegistry:
    def __init__(self, ports: Optional[Dict[str, int]] = None):
        self._lock = threading.Lock()
        self.services: Dict[str, Dict] = {}
        for name, port in (ports or {}).items():
            self.register(name, port)

    def register(self, name: str, port: int) -> Dict:
        with self._lock:
            entry = {"port": port, "alive": True}
            self.services[name] = entry
        log.info("Registered %s on port %s", name, port)
        return entry

    def discover(self, name: str) -> Optional[Dict]:
        with self._lock:
            return self.services.get(name)

    def snapshot(self) -> Dict[str, Dict]:
        with self._lock:
            return {k: dict(v) for k, v in self.services.items()}


def default_registry() -> ServiceRegistry:
    return ServiceRegistry(SERVICE_PORTS)
