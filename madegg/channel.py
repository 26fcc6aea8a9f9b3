from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Protocol
from jsonschema import validate, ValidationError
from .models import Session
from .flows import DialogueEngine, GREETING, TERMINAL_MESSAGE
from .json_schemas import INBOUND_FRAME_SCHEMA
from .logger import get_logger

log = get_logger("madegg.channel")

BOT_ID = "bot"


class DuplexStream(Protocol):
    async def receive(self) -> Optional[Dict]:
        """Next inbound frame, or None once the peer has finished sending."""
    async def send(self, frame: Dict) -> None: ...
    async def close(self) -> None: ...


@dataclass
class Connection:
    """One Session bound to one stream for the lifetime of a connection."""
    stream: DuplexStream
    session: Session = field(default_factory=Session)
    user_id: Optional[str] = None
    closed: bool = False


def frame_text(frame) -> str:
    try:
        validate(frame, INBOUND_FRAME_SCHEMA)
    except ValidationError as e:
        log.warning("Malformed inbound frame treated as empty text: %s", e.message)
        return ""
    return frame["text"]


class ChannelAdapter:
    def __init__(self, engine: DialogueEngine, stream: DuplexStream):
        self.engine = engine
        self.conn = Connection(stream=stream)

    @property
    def session(self) -> Session:
        return self.conn.session

    async def send_reply(self, text: str) -> None:
        await self.conn.stream.send({"user_id": BOT_ID, "text": text})

    async def run(self) -> None:
        """Greet, then answer every inbound frame in order until the chat ends."""
        try:
            await self.send_reply(GREETING)
            while not self.conn.closed:
                frame = await self.conn.stream.receive()
                if frame is None:
                    log.info("Inbound side finished (user=%s, step=%s)", self.conn.user_id, self.session.step.value)
                    break
                if isinstance(frame, dict) and isinstance(frame.get("user_id"), str):
                    self.conn.user_id = frame["user_id"]
                reply = self.engine.handle(frame_text(frame), self.session)
                await self.send_reply(reply)
                if reply == TERMINAL_MESSAGE:
                    break
        except Exception as e:
            # transport failure: the half-finished session is simply dropped
            log.error("Live chat transport error (user=%s): %s", self.conn.user_id, e)
        finally:
            await self.close()

    async def close(self) -> None:
        if self.conn.closed:
            return
        self.conn.closed = True
        try:
            await self.conn.stream.close()
        except Exception as e:
            log.warning("Error closing stream: %s", e)
        log.info("Live chat closed (user=%s)", self.conn.user_id)
