import threading
import weakref
from typing import Any, Dict, List, Optional, Tuple

from .api_loader import WidgetApiLoader
from .config import DEFAULT_VOLUME, LOG_BUFFER_SIZE, POLL_INTERVAL
from .dom import Element, Page
from .models import Track
from .track_loader import TrackListLoader


class BaseState:
    def __init__(
        self,
        track_loader: TrackListLoader,
        fetch_api,
        page: Optional[Page] = None,
        poll_interval: float = POLL_INTERVAL,
        volume: int = DEFAULT_VOLUME,
    ) -> None:
        # sync primitives (RLock: widget callbacks may re-enter from a call we made)
        self.lock = threading.RLock()

        # log buffer
        self._logs: List[str] = []
        self._log_max = LOG_BUFFER_SIZE

        self.page: Page = page or Page()
        self.track_loader = track_loader
        self.track_loader.log = self._append_log
        self.api_loader = WidgetApiLoader(self.page, fetch_api, log=self._append_log)

        # ordered, immutable track list of the current cache window
        self.tracks: Tuple[Track, ...] = ()
        self.current_index: int = 0

        # playback session
        self.is_playing: bool = False
        self.volume: int = volume
        self.is_muted: bool = False
        self.current_time: float = 0.0
        self.duration: float = 0.0
        self.player_ready: bool = False
        self.is_loading: bool = False
        self.api_loaded: bool = False
        self._auto_play_on_ready: bool = False

        # visibility
        self.main_player_visible: bool = False
        self.mini_player_dismissed: bool = False
        self.mini_player_activated: bool = False

        # the single widget and the container it renders into
        self.container = Element("global-video-player")
        self._widget: Any = None
        self._widget_video_id: Optional[str] = None

        # mount points supplied by mounted views; never owned by the session
        self._hosts: Dict[str, "weakref.ReferenceType[Element]"] = {}

        # progress polling
        self.poll_interval = poll_interval
        self._poll_thread: Optional[threading.Thread] = None
        self._poll_stop: Optional[threading.Event] = None
