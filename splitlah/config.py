import os

from dotenv import load_dotenv

load_dotenv()

# External AI collaborator
AI_PROVIDER = os.getenv("AI_PROVIDER", "openai")
RECEIPT_MODEL = os.getenv("RECEIPT_MODEL", "gpt-4o")
VOICE_MODEL = os.getenv("VOICE_MODEL", "gpt-4o")
TRANSCRIBE_MODEL = os.getenv("TRANSCRIBE_MODEL", "gpt-4o-transcribe")

# Sessions
DEFAULT_PEOPLE = [
    name.strip()
    for name in os.getenv("DEFAULT_PEOPLE", "Me (Host),Alice,Bob,Charlie").split(",")
    if name.strip()
]
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "7200"))

# Rate limits (slowapi syntax)
SCAN_RATE_LIMIT = os.getenv("SCAN_RATE_LIMIT", "20/minute")
VOICE_RATE_LIMIT = os.getenv("VOICE_RATE_LIMIT", "20/minute")
