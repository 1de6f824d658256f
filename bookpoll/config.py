"""Runtime configuration read from the environment."""

import os

# Redis-compatible REST store (Vercel KV / Upstash). When either is unset,
# polls live in process memory.
KV_REST_API_URL = os.environ.get("KV_REST_API_URL", "")
KV_REST_API_TOKEN = os.environ.get("KV_REST_API_TOKEN", "")
KV_TIMEOUT_SECONDS = float(os.environ.get("KV_TIMEOUT_SECONDS", "10"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()

POLL_ID_LENGTH = 10
BOOK_ID_LENGTH = 8


def kv_configured() -> bool:
    return bool(KV_REST_API_URL and KV_REST_API_TOKEN)
