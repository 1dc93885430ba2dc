from typing import Any, Optional, Tuple

from .models import PLAYER_VARS, Track, WidgetState


class LifecycleMixin:
    @property
    def current_track(self) -> Optional[Track]:
        if 0 <= self.current_index < len(self.tracks):
            return self.tracks[self.current_index]
        return None

    @property
    def widget(self) -> Any:
        return self._widget

    def mount(self) -> Tuple[Track, ...]:
        """
        Called whenever a view that uses the player mounts.

        Refreshes the track list (subject to the loader's cache window) and,
        once there is something to play, asks for the widget script. The
        network fetch runs outside the session lock.
        """
        with self.lock:
            self.is_loading = not self.track_loader.is_fresh()
        try:
            tracks = self.track_loader.get()
        finally:
            with self.lock:
                self.is_loading = False
        with self.lock:
            self._apply_tracks_unlocked(tracks)
            has_tracks = bool(self.tracks)
        if has_tracks:
            self.api_loader.request(self._on_api_loaded)
        return tracks

    def refresh_tracks(self) -> Tuple[Track, ...]:
        """Drop the cached track list and mount again."""
        self.track_loader.invalidate()
        return self.mount()

    def teardown(self) -> None:
        """End of page lifetime: no timer or widget may outlive this call."""
        with self.lock:
            self._append_log("Teardown requested")
            self._auto_play_on_ready = False
            self._destroy_widget_unlocked()
            self.is_playing = False

    # ---------- internal helpers ----------

    def _apply_tracks_unlocked(self, tracks: Tuple[Track, ...]) -> None:
        """
        Install a freshly loaded track list, keeping the current track if it
        is still present. Caller must hold self.lock.
        """
        if tracks == self.tracks:
            return
        old = self.current_track
        self.tracks = tuple(tracks)

        new_index = 0
        if old is not None:
            for i, t in enumerate(self.tracks):
                if t.identifier == old.identifier:
                    new_index = i
                    break
        if not self.tracks:
            self._append_log("No tracks available; player is inert")
            self.current_index = 0
            self._destroy_widget_unlocked()
            self.is_playing = False
            self.current_time = 0.0
            self.duration = 0.0
            return

        if old is not None and self.tracks[new_index].identifier != old.identifier:
            # current track is gone: same reset as a manual track change
            self._append_log(f"Current track {old.identifier} removed; moving to index {new_index}")
            self._switch_track_unlocked(
                new_index, resume=self.is_playing or self._auto_play_on_ready
            )
            return
        self.current_index = new_index
        self._sync_widget_unlocked()

    def _on_api_loaded(self, api: Any) -> None:
        with self.lock:
            self.api_loaded = True
            self._sync_widget_unlocked()

    def _sync_widget_unlocked(self, force: bool = False) -> None:
        """
        Make sure exactly one widget is bound to the current track.

        Builds a new widget when the API is loaded and the current track id
        differs from the live widget's, or when ``force`` is set. The old
        widget is always destroyed first. Caller must hold self.lock.
        """
        track = self.current_track
        if not self.api_loaded or track is None:
            return
        if (
            not force
            and self._widget is not None
            and self._widget_video_id == track.identifier
        ):
            return

        self._destroy_widget_unlocked()
        api = self.api_loader.api
        try:
            widget = api.Player(
                self.container,
                video_id=track.identifier,
                player_vars=dict(PLAYER_VARS),
                on_ready=self._on_widget_ready,
                on_state_change=self._on_widget_state_change,
            )
        except Exception as e:
            self._append_log(f"Widget construction failed for {track.identifier}: {e!r}")
            return
        self._widget = widget
        self._widget_video_id = track.identifier
        self._append_log(
            f"Widget created for track {self.current_index} ({track.identifier})"
        )

    def _destroy_widget_unlocked(self) -> None:
        self._stop_polling_unlocked()
        widget = self._widget
        self._widget = None
        self._widget_video_id = None
        self.player_ready = False
        if widget is not None:
            self._widget_call("destroying widget", widget.destroy)

    def _switch_track_unlocked(self, index: int, resume: bool) -> None:
        """
        Move to ``index`` and rebuild the widget for it. ``resume`` is
        consumed by the next ready callback. Caller must hold self.lock.
        """
        self._auto_play_on_ready = resume
        self.is_playing = False
        self.current_index = index
        self.current_time = 0.0
        self.duration = 0.0
        self.player_ready = False
        self._stop_polling_unlocked()
        self._sync_widget_unlocked(force=True)

    # ---------- widget callbacks ----------

    def _on_widget_ready(self, target: Any) -> None:
        with self.lock:
            if target is not self._widget:
                return
            self.player_ready = True
            self._widget_call("setting volume", target.set_volume, self.volume)
            if self.is_muted:
                self._widget_call("muting", target.mute)
            if self._auto_play_on_ready:
                self._auto_play_on_ready = False
                self._widget_call("playing", target.play_video)
            dur = self._widget_call("reading duration", target.get_duration)
            if dur:
                self.duration = float(dur)

    def _on_widget_state_change(self, target: Any, state: int) -> None:
        with self.lock:
            if target is not self._widget:
                return
            if state == WidgetState.PLAYING:
                self.is_playing = True
                self.mini_player_activated = True
                self.mini_player_dismissed = False
                dur = self._widget_call("reading duration", target.get_duration)
                if dur:
                    self.duration = float(dur)
                self._start_polling_unlocked()
                self._relocate_unlocked()
            elif state == WidgetState.PAUSED:
                self.is_playing = False
                self._stop_polling_unlocked()
            elif state == WidgetState.ENDED:
                self.is_playing = False
                self._stop_polling_unlocked()
                if not self.tracks:
                    return
                next_index = (self.current_index + 1) % len(self.tracks)
                self._append_log(f"Track ended; advancing to index {next_index}")
                self._switch_track_unlocked(next_index, resume=True)
            else:
                self._append_log(f"Widget state {state}")
