import os, sys, requests, uuid
from dotenv import load_dotenv

load_dotenv()
API_BASE = os.getenv("API_BASE", "http://127.0.0.1:3000")
API_KEY = os.getenv("MADEGG_API_KEY", "SECRET123")
SESSION_ID = f"cli-{uuid.uuid4().hex[:6]}"
TERMINAL = "Thank you for chatting with us!"

def send(text):
    url = f"{API_BASE}/api/chatbot"
    payload = {"message": text, "user_id": "cli-user", "session_id": SESSION_ID, "api_key": API_KEY}
    r = requests.post(url, json=payload, timeout=30)
    r.raise_for_status()
    return r.json()

def main():
    print("Hello! I can help with:")
    print("[1] Menu   [2] Hours   [3] Location   [4] Help (Feedback and Complaint)")
    print("Type a number or just start chatting. Ctrl+C to exit.")
    while True:
        try:
            user = input("> ").strip()
            if not user:
                continue
            data = send(user)
            print(f"Mad Egg: {data['reply']}")
            if data.get("ticket_id"):
                print(f"  meta: ticket={data.get('ticket_id')} actions={data.get('meta',{}).get('actions')}")
            if data["reply"].startswith(TERMINAL):
                break
        except KeyboardInterrupt:
            print("\nGoodbye!"); break
        except requests.RequestException as e:
            print(f"(error) {e}", file=sys.stderr)

if __name__ == "__main__":
    main()
