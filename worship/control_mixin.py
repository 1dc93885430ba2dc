class ControlMixin:
    def play(self) -> None:
        with self.lock:
            self._append_log("Play requested")
            self.mini_player_dismissed = False
            if self._widget is not None and self.player_ready:
                self._widget_call("playing", self._widget.play_video)
            else:
                # start as soon as the widget reports ready
                self._auto_play_on_ready = True
            self._relocate_unlocked()

    def pause(self) -> None:
        with self.lock:
            self._append_log("Pause requested")
            self._auto_play_on_ready = False
            if self._widget is not None:
                self._widget_call("pausing", self._widget.pause_video)

    def toggle_play(self) -> None:
        with self.lock:
            if self.is_playing:
                self.pause()
            else:
                self.play()

    def next(self) -> None:
        with self.lock:
            if not self.tracks:
                self._append_log("Next requested but track list is empty")
                return
            index = (self.current_index + 1) % len(self.tracks)
            self._append_log(f"Next requested (index {index})")
            self._switch_track_unlocked(index, resume=self.is_playing)

    def previous(self) -> None:
        with self.lock:
            if not self.tracks:
                self._append_log("Previous requested but track list is empty")
                return
            index = (self.current_index - 1) % len(self.tracks)
            self._append_log(f"Previous requested (index {index})")
            self._switch_track_unlocked(index, resume=self.is_playing)

    def select_track(self, index: int) -> None:
        """
        Jump straight to ``index``. Raises IndexError for an index outside
        the current track list and leaves the session untouched.
        """
        with self.lock:
            if index < 0 or index >= len(self.tracks):
                self._append_log(f"select_track out of range: {index}")
                raise IndexError(f"track index out of range: {index}")
            self._append_log(f"select_track requested: {index}")
            self._switch_track_unlocked(index, resume=self.is_playing)

    def seek(self, seconds: float) -> None:
        seconds = max(0.0, float(seconds))
        with self.lock:
            self._append_log(f"Seek requested to {seconds} seconds")
            self.current_time = seconds
            if self._widget is not None:
                self._widget_call("seeking", self._widget.seek_to, seconds, True)

    def set_volume(self, level: int) -> None:
        level = max(0, min(100, int(level)))
        with self.lock:
            self.volume = level
            widget = self._widget
            if widget is not None:
                self._widget_call("setting volume", widget.set_volume, level)
            if level == 0:
                self.is_muted = True
            elif self.is_muted:
                self.is_muted = False
                if widget is not None:
                    self._widget_call("unmuting", widget.unmute)

    def toggle_mute(self) -> None:
        with self.lock:
            widget = self._widget
            if self.is_muted:
                self.is_muted = False
                if widget is not None:
                    self._widget_call("unmuting", widget.unmute)
                    # the widget's own pre-mute level is not trusted
                    self._widget_call("setting volume", widget.set_volume, self.volume)
            else:
                self.is_muted = True
                if widget is not None:
                    self._widget_call("muting", widget.mute)

    def get_state(self) -> dict:
        with self.lock:
            track = self.current_track
            parent = self.container.parent
            placement = None
            for kind in ("main", "mini"):
                if parent is not None and parent is self._host(kind):
                    placement = kind
            return {
                "tracks": [t.to_dict() for t in self.tracks],
                "current_index": self.current_index,
                "current_track": track.to_dict() if track else None,
                "is_playing": self.is_playing,
                "volume": self.volume,
                "is_muted": self.is_muted,
                "current_time": self.current_time,
                "duration": self.duration,
                "player_ready": self.player_ready,
                "is_loading": self.is_loading,
                "api_loaded": self.api_loaded,
                "main_player_visible": self.main_player_visible,
                "mini_player_dismissed": self.mini_player_dismissed,
                "mini_player_activated": self.mini_player_activated,
                "show_mini_player": self.show_mini_player,
                "placement": placement,
            }
