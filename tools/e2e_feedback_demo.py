"""End-to-end demo of the feedback flow against a running server.

Usage (from the project root with the venv activated):

uvicorn madegg.server:app --port 3000
python tools/e2e_feedback_demo.py

Posts the scripted flow feedback -> location 2 -> message -> email -> no
on one facade session and prints each JSON response.
"""
import os
import sys
import uuid
import requests

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:3000")
CHAT_URL = API_BASE.rstrip("/") + "/api/chatbot"
API_KEY = os.getenv("MADEGG_API_KEY", "SECRET123")

SESSION_ID = f"e2e-{uuid.uuid4().hex[:8]}"
SCRIPT = ["feedback", "2", "great service and lovely staff", "demo@example.com", "no"]

def post(text):
    try:
        r = requests.post(CHAT_URL, json={"message": text, "session_id": SESSION_ID, "api_key": API_KEY}, timeout=10)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        print("Request failed:", e)
        if getattr(e, 'response', None) is not None:
            print('Status:', e.response.status_code)
            print(e.response.text)
        sys.exit(1)

if __name__ == '__main__':
    print(f"Posting to {CHAT_URL} (session {SESSION_ID})")
    for step, text in enumerate(SCRIPT, start=1):
        print(f"\n==> Step {step}: {text!r}")
        resp = post(text)
        print(resp["reply"])
        if resp.get("ticket_id"):
            print("ticket:", resp["ticket_id"])
    print("\nDemo complete.")
