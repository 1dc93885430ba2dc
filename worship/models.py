from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional


class WidgetState(IntEnum):
    """Numeric states reported by the widget's state-change callback."""

    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


# The session draws its own controls, so all default chrome and autoplay is off.
PLAYER_VARS: Dict[str, int] = {
    "autoplay": 0,
    "controls": 0,
    "modestbranding": 1,
    "rel": 0,
    "showinfo": 0,
    "fs": 0,
    "playsinline": 1,
}


@dataclass(frozen=True)
class Track:
    identifier: str
    title: str
    position: int = 0
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_at: Optional[str] = None

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Track":
        """
        Build a Track from one record of the track-list endpoint.

        Accepts the camelCase keys the endpoint emits. Raises ValueError
        when the external video identifier is missing.
        """
        identifier = data.get("youtubeVideoId") or data.get("identifier")
        if not identifier:
            raise ValueError("track record has no video identifier")
        try:
            position = int(data.get("position") or 0)
        except (TypeError, ValueError):
            position = 0
        return cls(
            identifier=str(identifier),
            title=str(data.get("title") or ""),
            position=position,
            description=data.get("description"),
            thumbnail_url=data.get("thumbnailUrl"),
            published_at=data.get("publishedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "youtubeVideoId": self.identifier,
            "title": self.title,
            "description": self.description,
            "thumbnailUrl": self.thumbnail_url,
            "publishedAt": self.published_at,
            "position": self.position,
        }
