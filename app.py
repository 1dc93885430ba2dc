#!/usr/bin/env python3
"""
Worship music player service with a session-protected control API (Flask).

- Config via .env (ADMIN_USERNAME, ADMIN_PASSWORD, HOST, PORT, TRACKS_URL,
  CATALOG_PATH, TRACK_CACHE_TTL, POLL_INTERVAL, ...)
- Public GET /api/worship-videos serves the track catalog the player fetches
- Username/password login -> server issues random session token (in memory)
- All player endpoints require Bearer token (session) in Authorization header
- POST /view tells the player which page is on screen; the worship page owns
  the main player slot, every other page leaves the floating mini player
- Keeps a console log buffer (widget events + actions)
"""
import atexit
import json
import os
import secrets
import threading
from typing import Dict, Set

from flask import Flask, request, jsonify
from dotenv import load_dotenv

# Load .env if present
load_dotenv()

from worship.config import CATALOG_PATH
from worship.dom import Element
from worship_core import player_session

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change_me_now")

# Page that renders the full player; all others fall back to the mini player
WORSHIP_PAGE = "worship"

# In-memory session tokens
ACTIVE_SESSIONS: Set[str] = set()

# Hosts owned by the currently mounted views (the player only keeps weak refs)
MOUNTED_HOSTS: Dict[str, Element] = {}
_view_lock = threading.Lock()

# Flask app setup
app = Flask(__name__)


def load_catalog() -> list:
    """Load the worship video catalog, ordered by position.

    Records look like:
    {"youtubeVideoId": str, "title": str, "description": str | None,
     "thumbnailUrl": str | None, "publishedAt": str | None, "position": int}
    """
    try:
        if CATALOG_PATH.exists():
            with CATALOG_PATH.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, list):
                records = [r for r in data if isinstance(r, dict)]
                return sorted(records, key=lambda r: r.get("position") or 0)
    except (OSError, ValueError) as e:
        print(f"[Catalog] Error loading {CATALOG_PATH}: {e}")
    return []


def start_session() -> None:
    """
    Mount the always-present mini player host.
    """
    with _view_lock:
        if "mini" not in MOUNTED_HOSTS:
            host = Element("mini-player")
            MOUNTED_HOSTS["mini"] = host
            player_session.register_host("mini", host)


def navigate(page: str) -> None:
    """Swap the main host in or out for the page now on screen."""
    with _view_lock:
        old_main = MOUNTED_HOSTS.pop("main", None)
        if page == WORSHIP_PAGE:
            host = Element("worship-main-player")
            MOUNTED_HOSTS["main"] = host
            player_session.register_host("main", host)
            player_session.set_main_player_visible(True)
        else:
            player_session.set_main_player_visible(False)
            if old_main is not None:
                player_session.unregister_host("main", old_main)
    player_session.mount()


def _get_token_from_header() -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1]


def _require_session() -> bool:
    token = _get_token_from_header()
    if not token or token not in ACTIVE_SESSIONS:
        return False
    return True


def _unauthorized():
    return jsonify({"detail": "Unauthorized"}), 401


# ========== PUBLIC ROUTES ==========


@app.get("/api/worship-videos")
def worship_videos():
    return jsonify(load_catalog())


# ========== AUTH ROUTES ==========


@app.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if username != ADMIN_USERNAME or password != ADMIN_PASSWORD:
        return jsonify({"detail": "Invalid username or password"}), 401

    token = secrets.token_urlsafe(32)
    ACTIVE_SESSIONS.add(token)
    return jsonify({"token": token})


@app.post("/logout")
def logout():
    token = _get_token_from_header()
    if token:
        ACTIVE_SESSIONS.discard(token)
    return jsonify({"ok": True})


# ========== PLAYER ROUTES (SESSION REQUIRED) ==========


@app.get("/state")
def get_state():
    if not _require_session():
        return _unauthorized()
    return jsonify(player_session.get_state())


@app.get("/logs")
def get_logs():
    if not _require_session():
        return _unauthorized()
    try:
        limit = int(request.args.get("limit", "200"))
    except ValueError:
        limit = 200
    logs = player_session.get_logs(limit)
    return jsonify({"lines": logs})


@app.post("/view")
def view():
    if not _require_session():
        return _unauthorized()
    data = request.get_json(silent=True) or {}
    page = data.get("page")
    if not isinstance(page, str) or not page.strip():
        return jsonify({"detail": "page is required"}), 400
    navigate(page.strip())
    return jsonify({"ok": True, "page": page.strip()})


@app.post("/refresh")
def refresh():
    if not _require_session():
        return _unauthorized()
    tracks = player_session.refresh_tracks()
    return jsonify({"ok": True, "tracks": len(tracks)})


@app.post("/play")
def play():
    if not _require_session():
        return _unauthorized()
    player_session.play()
    return jsonify({"ok": True})


@app.post("/pause")
def pause():
    if not _require_session():
        return _unauthorized()
    player_session.pause()
    return jsonify({"ok": True})


@app.post("/toggle")
def toggle():
    if not _require_session():
        return _unauthorized()
    player_session.toggle_play()
    return jsonify({"ok": True})


@app.post("/next")
def next_track():
    if not _require_session():
        return _unauthorized()
    player_session.next()
    return jsonify({"ok": True, "index": player_session.current_index})


@app.post("/previous")
def previous_track():
    if not _require_session():
        return _unauthorized()
    player_session.previous()
    return jsonify({"ok": True, "index": player_session.current_index})


@app.post("/select")
def select():
    """
    Jump to specific track index.
    """
    if not _require_session():
        return _unauthorized()
    data = request.get_json(silent=True) or {}
    index = data.get("index")
    try:
        index = int(index)
    except (TypeError, ValueError):
        return jsonify({"detail": "index must be an integer"}), 400
    try:
        player_session.select_track(index)
    except IndexError as e:
        return jsonify({"detail": str(e)}), 400
    return jsonify({"ok": True, "index": index})


@app.post("/seek")
def seek():
    if not _require_session():
        return _unauthorized()
    data = request.get_json(silent=True) or {}
    seconds = data.get("seconds")
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        return jsonify({"detail": "seconds must be a number"}), 400
    player_session.seek(seconds)
    return jsonify({"ok": True, "seconds": seconds})


@app.post("/volume")
def volume():
    if not _require_session():
        return _unauthorized()
    data = request.get_json(silent=True) or {}
    level = data.get("level")
    try:
        level = int(level)
    except (TypeError, ValueError):
        return jsonify({"detail": "level must be an integer"}), 400
    player_session.set_volume(level)
    return jsonify({"ok": True, "volume": player_session.volume})


@app.post("/mute")
def mute():
    if not _require_session():
        return _unauthorized()
    player_session.toggle_mute()
    return jsonify({"ok": True, "muted": player_session.is_muted})


@app.post("/dismiss")
def dismiss():
    if not _require_session():
        return _unauthorized()
    player_session.dismiss_mini_player()
    return jsonify({"ok": True})


if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "9000"))

    start_session()
    atexit.register(player_session.teardown)

    print(f"[App] Starting Flask server on {host}:{port}")
    app.run(host=host, port=port, threaded=True)
