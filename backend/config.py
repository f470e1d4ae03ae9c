"""
config.py
---------
Central configuration for the itinerary sync core.
All credentials loaded from environment variables — never hard-coded.

Remote mode is used only when every SYNC_* credential below is non-empty;
otherwise the app runs against the local file store.
"""

import os
from pathlib import Path

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
from dotenv import load_dotenv

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)

# ── Remote real-time store (Redis) ────────────────────────────────────────────
# e.g. SYNC_REMOTE_URL=redis://my-host:6379/0
SYNC_REMOTE_URL: str  = os.getenv("SYNC_REMOTE_URL", "")
SYNC_API_KEY: str     = os.getenv("SYNC_API_KEY", "")      # sent as the Redis password
SYNC_PROJECT_ID: str  = os.getenv("SYNC_PROJECT_ID", "")   # key namespace
SYNC_CONNECT_TIMEOUT: float = float(os.getenv("SYNC_CONNECT_TIMEOUT", "5"))

# Collection name (the hash that holds one JSON document per day)
REMOTE_COLLECTION_NAME: str = os.getenv("REMOTE_COLLECTION_NAME", "travel_plans")

# ── Local durable store ───────────────────────────────────────────────────────
LOCAL_STORE_DIR: str = os.getenv(
    "LOCAL_STORE_DIR", str(Path(__file__).resolve().parent / "data")
)
LOCAL_STORAGE_KEY: str = os.getenv("LOCAL_STORAGE_KEY", "beijing_travel_data")
LOCAL_CHANGE_EVENT: str = "local-storage-updated"

# ── Writer / listener ─────────────────────────────────────────────────────────
# Most recent failed writes the coordinator keeps for inspection
SYNC_ERROR_HISTORY: int = int(os.getenv("SYNC_ERROR_HISTORY", "50"))
# get_message() timeout of the pub/sub listener thread; bounds unsubscribe latency
SYNC_LISTENER_POLL_SECONDS: float = float(os.getenv("SYNC_LISTENER_POLL_SECONDS", "1.0"))

# ── Timeline window (hours) ───────────────────────────────────────────────────
TIMELINE_START_HOUR: int = int(os.getenv("TIMELINE_START_HOUR", "6"))
TIMELINE_END_HOUR: int   = int(os.getenv("TIMELINE_END_HOUR", "24"))
# Narrowest bar drawn, as a fraction of the window (1%)
TIMELINE_MIN_WIDTH: float = 0.01

# ── New-entity defaults ───────────────────────────────────────────────────────
DEFAULT_LINE_NAME: str  = "1号线八通线"
DEFAULT_LINE_COLOR: str = "#c23a30"
DEFAULT_TRANSPORT_MINUTES: int = 30
