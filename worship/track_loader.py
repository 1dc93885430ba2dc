import threading
import time
from typing import Callable, Dict, Optional, Tuple

import requests

from .config import TRACK_CACHE_TTL, TRACKS_FETCH_TIMEOUT, TRACKS_URL
from .models import Track


class TrackListLoader:
    """
    Fetch the ordered worship track list and keep it for ``ttl`` seconds.

    A failed fetch returns the last list that loaded (empty if none ever
    did) without refreshing the cache window, so the next call goes back to
    the network. Nothing is retried on its own.
    """

    def __init__(
        self,
        url: str = TRACKS_URL,
        ttl: float = TRACK_CACHE_TTL,
        timeout: float = TRACKS_FETCH_TIMEOUT,
        http: Optional[requests.Session] = None,
        log: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.ttl = ttl
        self.timeout = timeout
        self.http = http or requests.Session()
        self.log = log or (lambda msg: None)
        self._clock = clock
        self._lock = threading.Lock()
        # keyed by identifier; insertion order is playback order
        self._tracks: Dict[str, Track] = {}
        self._fetched_at: Optional[float] = None

    def is_fresh(self) -> bool:
        with self._lock:
            return (
                self._fetched_at is not None
                and self._clock() - self._fetched_at < self.ttl
            )

    def invalidate(self) -> None:
        """Mark the list stale. The last good list is kept until a fetch succeeds."""
        with self._lock:
            self._fetched_at = None

    def get(self) -> Tuple[Track, ...]:
        with self._lock:
            if self._fetched_at is not None and self._clock() - self._fetched_at < self.ttl:
                return tuple(self._tracks.values())

        tracks = self._fetch()
        if tracks is None:
            # stays stale, so the next call fetches again
            with self._lock:
                return tuple(self._tracks.values())

        with self._lock:
            self._tracks = tracks
            self._fetched_at = self._clock()
            return tuple(self._tracks.values())

    def _fetch(self) -> Optional[Dict[str, Track]]:
        try:
            resp = self.http.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            self.log(f"Track list fetch failed: {e}")
            return None

        if not isinstance(data, list):
            self.log("Track list fetch failed: response is not a list")
            return None

        parsed = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            try:
                parsed.append(Track.from_record(raw))
            except ValueError as e:
                self.log(f"Skipping track record: {e}")

        # stable sort keeps endpoint order for equal positions
        parsed.sort(key=lambda t: t.position)
        tracks: Dict[str, Track] = {}
        for track in parsed:
            tracks.setdefault(track.identifier, track)
        self.log(f"Track list loaded with {len(tracks)} tracks")
        return tracks
