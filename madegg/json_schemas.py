INBOUND_FRAME_SCHEMA = {
  "type": "object",
  "properties": {
    "user_id": {"type": "string"},
    "text": {"type": "string"},
    "api_key": {"type": "string"}
  },
  "required": ["text"]
}
