import re
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
def sanitize_user_text(text: str) -> str:
    """Strip control characters and surrounding whitespace from browser/CLI input."""
    return CONTROL_CHARS.sub(" ", text or "").strip()
