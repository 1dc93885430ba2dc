#!/usr/bin/env python3
"""
Process-wide worship player session.

The session fetches its track list from TRACKS_URL and drives the headless
widget, so the service keeps a playback session alive without a browser.
"""

from worship.config import HEADLESS_TRACK_SECONDS
from worship.headless_widget import HeadlessApi
from worship.player_session import PlayerSession
from worship.track_loader import TrackListLoader


def build_session() -> PlayerSession:
    return PlayerSession(
        track_loader=TrackListLoader(),
        fetch_api=lambda: HeadlessApi(track_seconds=HEADLESS_TRACK_SECONDS),
    )


player_session = build_session()
