"""
Clock-driven stand-in for the embedded video widget.

It honours the same imperative surface and callbacks as the browser widget
but plays nothing: position is derived from a monotonic clock, the way the
streamer derives position for a running decoder, and a timer reports ENDED
when the track duration is reached. The app uses it to run a session on a
server with no browser attached.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional

from .config import HEADLESS_TRACK_SECONDS
from .dom import Element
from .models import WidgetState


class HeadlessPlayer:
    def __init__(
        self,
        container: Element,
        video_id: str,
        player_vars: Optional[Dict[str, int]] = None,
        on_ready: Optional[Callable[[Any], None]] = None,
        on_state_change: Optional[Callable[[Any, int], None]] = None,
        duration: float = HEADLESS_TRACK_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.container = container
        self.video_id = video_id
        self.player_vars = dict(player_vars or {})
        self.on_ready = on_ready
        self.on_state_change = on_state_change
        self.duration = float(duration)
        self._clock = clock

        self.state = WidgetState.UNSTARTED
        self.position_sec = 0.0
        self.last_start_monotonic = 0.0
        self.volume = 100
        self.muted = False
        self.destroyed = False

        self._lock = threading.RLock()
        self._end_timer: Optional[threading.Timer] = None

        self.frame = Element(f"frame:{video_id}")
        container.append_child(self.frame)

        # ready is reported after the constructor returns, as the real widget does
        self._ready_timer = threading.Timer(0.0, self._fire_ready)
        self._ready_timer.daemon = True
        self._ready_timer.start()

    # ---------- callbacks ----------

    def _fire_ready(self) -> None:
        if self.destroyed:
            return
        if self.player_vars.get("autoplay"):
            self.play_video()
        if self.on_ready is not None:
            self.on_ready(self)

    def _emit(self, state: WidgetState) -> None:
        self.state = state
        if self.on_state_change is not None and not self.destroyed:
            self.on_state_change(self, int(state))

    def _on_end(self) -> None:
        with self._lock:
            if self.destroyed or self.state != WidgetState.PLAYING:
                return
            self.position_sec = self.duration
            self._end_timer = None
        self._emit(WidgetState.ENDED)

    # ---------- timing ----------

    def _position_unlocked(self) -> float:
        if self.state == WidgetState.PLAYING:
            dt = self._clock() - self.last_start_monotonic
            return min(self.position_sec + dt, self.duration)
        return self.position_sec

    def _arm_end_timer_unlocked(self) -> None:
        self._cancel_end_timer_unlocked()
        remaining = max(self.duration - self.position_sec, 0.0)
        self._end_timer = threading.Timer(remaining, self._on_end)
        self._end_timer.daemon = True
        self._end_timer.start()

    def _cancel_end_timer_unlocked(self) -> None:
        if self._end_timer is not None:
            self._end_timer.cancel()
            self._end_timer = None

    # ---------- imperative API ----------

    def play_video(self) -> None:
        with self._lock:
            if self.destroyed or self.state == WidgetState.PLAYING:
                return
            if self.position_sec >= self.duration:
                self.position_sec = 0.0
            self.last_start_monotonic = self._clock()
            self.state = WidgetState.PLAYING
            self._arm_end_timer_unlocked()
        self._emit(WidgetState.PLAYING)

    def pause_video(self) -> None:
        with self._lock:
            if self.destroyed or self.state != WidgetState.PLAYING:
                return
            self.position_sec = self._position_unlocked()
            self._cancel_end_timer_unlocked()
            self.state = WidgetState.PAUSED
        self._emit(WidgetState.PAUSED)

    def stop_video(self) -> None:
        with self._lock:
            if self.destroyed:
                return
            self._cancel_end_timer_unlocked()
            self.position_sec = 0.0
        self._emit(WidgetState.UNSTARTED)

    def load_video_by_id(self, video_id: str) -> None:
        with self._lock:
            if self.destroyed:
                return
            self._cancel_end_timer_unlocked()
            self.video_id = video_id
            self.position_sec = 0.0
            self.state = WidgetState.UNSTARTED
        self.play_video()

    def cue_video_by_id(self, video_id: str) -> None:
        with self._lock:
            if self.destroyed:
                return
            self._cancel_end_timer_unlocked()
            self.video_id = video_id
            self.position_sec = 0.0
        self._emit(WidgetState.CUED)

    def get_current_time(self) -> float:
        with self._lock:
            return self._position_unlocked()

    def get_duration(self) -> float:
        return self.duration

    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        with self._lock:
            if self.destroyed:
                return
            self.position_sec = max(0.0, min(float(seconds), self.duration))
            if self.state == WidgetState.PLAYING:
                self.last_start_monotonic = self._clock()
                self._arm_end_timer_unlocked()

    def set_volume(self, volume: int) -> None:
        self.volume = max(0, min(100, int(volume)))

    def get_volume(self) -> int:
        return self.volume

    def mute(self) -> None:
        self.muted = True

    def unmute(self) -> None:
        self.muted = False

    def is_muted(self) -> bool:
        return self.muted

    def get_player_state(self) -> int:
        return int(self.state)

    def destroy(self) -> None:
        with self._lock:
            self.destroyed = True
            self._ready_timer.cancel()
            self._cancel_end_timer_unlocked()
            self.frame.detach()


class HeadlessApi:
    """Widget API namespace handed to the session once the "script" is loaded."""

    def __init__(self, track_seconds: float = HEADLESS_TRACK_SECONDS) -> None:
        self.track_seconds = track_seconds

    def Player(self, container: Element, **kwargs: Any) -> HeadlessPlayer:
        kwargs.setdefault("duration", self.track_seconds)
        return HeadlessPlayer(container, **kwargs)
