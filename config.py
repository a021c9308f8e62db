import os

# Process configuration, read once from the environment at import time.

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Vision backend. When GCP_PROJECT_ID is unset, grid upload is disabled (503).
GCP_PROJECT_ID = os.environ.get("GCP_PROJECT_ID") or None
GCP_REGION = os.environ.get("GCP_REGION") or "europe-west1"
VISION_MODEL = os.environ.get("VISION_MODEL", "gemini-2.5-flash")
VISION_TIMEOUT = float(os.environ.get("VISION_TIMEOUT", "120"))

# Upload limits
MAX_UPLOAD_BYTES = 10 << 20  # 10 MiB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png")

# Rate limiting (tokens per interval, interval in seconds)
UPLOAD_RATE = 5
UPLOAD_INTERVAL = 60.0
MOVE_RATE = 60
MOVE_INTERVAL = 1.0
RATE_LIMIT_CLEANUP_SECONDS = 60
RATE_LIMIT_IDLE_SECONDS = 5 * 60

# Event streaming
SUBSCRIBER_QUEUE_SIZE = 16
HEARTBEAT_SECONDS = 30.0

PSEUDO_MAX_LENGTH = 20
