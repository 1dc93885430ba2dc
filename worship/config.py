import os
from pathlib import Path

# Public track-list endpoint. By default the app fetches its own catalog route.
_host = os.getenv("HOST", "127.0.0.1")
_port = os.getenv("PORT", "9000")
TRACKS_URL = os.getenv("TRACKS_URL", f"http://{_host}:{_port}/api/worship-videos")

# Cache lifetime of the fetched track list (seconds)
TRACK_CACHE_TTL = float(os.getenv("TRACK_CACHE_TTL", "300"))
TRACKS_FETCH_TIMEOUT = float(os.getenv("TRACKS_FETCH_TIMEOUT", "10"))

# Widget script. The headless widget ignores the URL but the loader still
# records a script tag for it so repeated loads stay idempotent.
WIDGET_API_SRC = os.getenv("WIDGET_API_SRC", "https://www.youtube.com/iframe_api")
SCRIPT_LOAD_TIMEOUT = float(os.getenv("SCRIPT_LOAD_TIMEOUT", "15"))

POLL_INTERVAL = float(os.getenv("POLL_INTERVAL", "1.0"))

try:
    DEFAULT_VOLUME = max(0, min(100, int(os.getenv("DEFAULT_VOLUME", "80"))))
except ValueError:
    DEFAULT_VOLUME = 80

HEADLESS_TRACK_SECONDS = float(os.getenv("HEADLESS_TRACK_SECONDS", "240"))

CATALOG_PATH = Path(
    os.getenv(
        "CATALOG_PATH",
        os.path.join(os.path.dirname(__file__), "..", "worship_videos.json"),
    )
).resolve()

# Lines kept in the session's in-memory log buffer (served at /logs)
LOG_BUFFER_SIZE = max(1, int(os.getenv("LOG_BUFFER_SIZE", "300")))
