import os
from dotenv import load_dotenv
from typing import Optional

# Load .env into the environment (no-op if not present).
load_dotenv()

BRAND = "Mad Egg"

LOCATIONS = [
    "Millenium Walkway",
    "Charlotte Way",
    "Dundrum Shopping Centre",
    "Liffey Valley Shopping Centre",
]

STAFF_NEGATIVE = "Senior Manager"
STAFF_DEFAULT = "Team Member"

# Response windows quoted in ticket notifications, keyed by sentiment label.
RESPONSE_WINDOW = {"negative": "1 business day"}
DEFAULT_RESPONSE_WINDOW = "2-3 business days"

SERVICE_PORTS = {"chatbot": 50051, "ticketing": 50052, "sentiment": 50053, "gui": 3000}

# Logging: level name and file path; an empty MADEGG_LOG_FILE turns the file copy off.
LOG_LEVEL = os.getenv("MADEGG_LOG_LEVEL") or "INFO"
LOG_FILE = os.getenv("MADEGG_LOG_FILE", os.path.join(os.path.dirname(__file__), "..", "logs", "madegg.log"))

SMTP_HOST: Optional[str] = os.getenv("MADEGG_SMTP_HOST")
SMTP_PORT = int(os.getenv("MADEGG_SMTP_PORT") or 465)
SMTP_USER: Optional[str] = os.getenv("MADEGG_SMTP_USER")
SMTP_PASSWORD: Optional[str] = os.getenv("MADEGG_SMTP_PASSWORD")
NOTIFY_TO = os.getenv("MADEGG_NOTIFY_TO") or "managers@madegg.example"
NOTIFY_FROM = os.getenv("MADEGG_NOTIFY_FROM") or SMTP_USER or "chatbot@madegg.example"

# Shared credential for the RPC surface. Tests and notebooks can swap it at runtime.
_API_KEY: str = os.getenv("MADEGG_API_KEY") or "SECRET123"


def set_api_key(key: str) -> None:
    """Set the shared API credential at runtime."""
    global _API_KEY
    _API_KEY = key
    os.environ["MADEGG_API_KEY"] = key


def get_api_key() -> str:
    # Prefer the environment so callers that set it after import are honored.
    return os.getenv("MADEGG_API_KEY") or _API_KEY
