from __future__ import annotations
import json
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict

from fastapi import FastAPI, HTTPException, Header, WebSocket
from pydantic import BaseModel

from .channel import ChannelAdapter
from .config import get_api_key
from .flows import DialogueEngine, TERMINAL_MESSAGE
from .intents import normalize, match_location
from .models import Session
from .notifications import Notifier
from .sanitize import sanitize_user_text
from .storage import TicketStore, SessionStore, ServiceRegistry, default_registry
from .tickets import TicketError
from .logger import get_logger

log = get_logger("madegg.server")

SUGGESTIONS = [
    "🍔 Ask about today's menu",
    "🕒 Check opening hours",
    "📍 Find your nearest Mad Egg location",
]

# WebSocket close code for a policy violation (bad credential).
WS_POLICY_VIOLATION = 1008


class ChatRequest(BaseModel):
    message: str
    user_id: str = "web-user"
    session_id: Optional[str] = None
    api_key: Optional[str] = None

class ChatResponse(BaseModel):
    reply: str
    session_id: Optional[str]
    ticket_id: Optional[str]
    meta: dict
    correlation_id: str

class TicketRequest(BaseModel):
    type: str
    message: str
    location: Optional[str] = None
    email: Optional[str] = None
    user_id: str = "web-user"
    api_key: Optional[str] = None


def check_credential(supplied: Optional[str]) -> None:
    if supplied != get_api_key():
        log.warning("Permission denied: bad or missing API key")
        raise HTTPException(status_code=403, detail="Permission denied")


class WebSocketStream:
    """Adapts a browser WebSocket to the channel adapter's duplex stream."""

    def __init__(self, ws: WebSocket):
        self.ws = ws
        self.closed = False

    async def receive(self) -> Optional[Dict]:
        message = await self.ws.receive()
        if message["type"] == "websocket.disconnect":
            self.closed = True
            return None
        data = message.get("text")
        if data is None:
            # binary frame: decode it rather than drop the message
            data = (message.get("bytes") or b"").decode("utf-8", errors="replace")
        try:
            msg = json.loads(data)
        except ValueError:
            log.warning("WS message error: not JSON")
            return {}
        if isinstance(msg, dict) and isinstance(msg.get("text"), str):
            msg["text"] = sanitize_user_text(msg["text"])
        return msg

    async def send(self, frame: Dict) -> None:
        await self.ws.send_json({
            "sender": frame.get("user_id", "bot"),
            "text": frame["text"],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self.ws.close()
        except RuntimeError:
            # the peer already went away
            pass


def create_app(engine: Optional[DialogueEngine] = None, sessions: Optional[SessionStore] = None,
               registry: Optional[ServiceRegistry] = None) -> FastAPI:
    engine = engine or DialogueEngine(store=TicketStore(), notifier=Notifier())
    sessions = sessions or SessionStore()
    registry = registry or default_registry()

    app = FastAPI(title="Mad Egg Chat - Menu, Hours, Locations + Feedback")
    app.state.engine = engine
    app.state.sessions = sessions
    app.state.registry = registry

    @app.post("/api/chatbot", response_model=ChatResponse)
    def chatbot(req: ChatRequest, x_api_key: Optional[str] = Header(default=None)):
        check_credential(req.api_key or x_api_key)
        corr = str(uuid.uuid4())
        clean_text = sanitize_user_text(req.message)
        if not clean_text:
            raise HTTPException(status_code=400, detail="Valid message is required")
        log.info("Incoming chat: user=%s session=%s text=%s", req.user_id, req.session_id, clean_text)
        if req.session_id:
            with sessions.checkout(req.session_id) as session:
                result = engine.respond(clean_text, session)
                step = session.step.value
                if result["message"] == TERMINAL_MESSAGE:
                    sessions.reset_session(req.session_id)
        else:
            # without a session id every call starts from the main menu
            session = Session()
            result = engine.respond(clean_text, session)
            step = session.step.value
        return ChatResponse(reply=result["message"], session_id=req.session_id, ticket_id=result.get("ticket_id"),
                            meta={"actions": result.get("actions"), "step": step}, correlation_id=corr)

    @app.post("/api/create-ticket")
    def create_ticket(req: TicketRequest, x_api_key: Optional[str] = Header(default=None)):
        check_credential(req.api_key or x_api_key)
        location = None
        if req.location:
            location = match_location(normalize(req.location))
            if not location:
                raise HTTPException(status_code=400, detail="Invalid location")
        try:
            t = engine.factory.create_from_request(req.type, sanitize_user_text(req.message), location, req.email)
        except TicketError as e:
            raise HTTPException(status_code=400, detail=str(e))
        engine.publish(t)
        return t.to_response()

    @app.get("/api/tickets")
    def list_tickets():
        return [t.to_dict() for t in engine.store.all()]

    @app.get("/api/tickets/{ticket_id}")
    def get_ticket(ticket_id: str):
        t = engine.store.get(ticket_id)
        if not t:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return t.to_dict()

    @app.get("/api/suggestions")
    def suggestions():
        return {"suggestions": SUGGESTIONS}

    @app.websocket("/ws/chat")
    async def live_chat(websocket: WebSocket, api_key: Optional[str] = None):
        supplied = api_key or websocket.headers.get("x-api-key")
        if supplied != get_api_key():
            log.warning("Live chat refused: bad or missing API key")
            await websocket.close(code=WS_POLICY_VIOLATION)
            return
        await websocket.accept()
        log.info("New live chat connection")
        await ChannelAdapter(engine, WebSocketStream(websocket)).run()

    @app.get("/healthz")
    def health():
        return {"ok": True, "tickets": len(engine.store), "services": registry.snapshot()}

    return app


app = create_app()
