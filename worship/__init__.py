from .dom import Element, Page
from .models import Track, WidgetState
from .player_session import PlayerSession
from .track_loader import TrackListLoader

__all__ = [
    "Element",
    "Page",
    "PlayerSession",
    "Track",
    "TrackListLoader",
    "WidgetState",
]
