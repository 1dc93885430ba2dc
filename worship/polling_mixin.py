import threading


class PollingMixin:
    @property
    def polling(self) -> bool:
        return self._poll_thread is not None

    def _start_polling_unlocked(self) -> None:
        """
        (Re)start the progress loop. Caller must hold self.lock.
        """
        self._stop_polling_unlocked()
        stop = threading.Event()
        t = threading.Thread(target=self._poll_loop, args=(stop,), daemon=True)
        self._poll_stop = stop
        self._poll_thread = t
        t.start()

    def _stop_polling_unlocked(self) -> None:
        if self._poll_stop is not None:
            self._poll_stop.set()
        self._poll_stop = None
        self._poll_thread = None

    def _poll_loop(self, stop: threading.Event) -> None:
        """Refresh position and duration from the widget every poll_interval."""
        while not stop.wait(self.poll_interval):
            with self.lock:
                if stop.is_set():
                    break
                self._refresh_progress_unlocked()

    def _refresh_progress_unlocked(self) -> bool:
        """
        Read one progress sample. A failing widget call skips this tick
        only. Caller must hold self.lock.
        """
        widget = self._widget
        if widget is None:
            return False
        try:
            pos = widget.get_current_time()
            dur = widget.get_duration()
        except Exception as e:
            self._append_log(f"Progress poll failed: {e!r}")
            return False
        self.current_time = float(pos or 0.0)
        if dur:
            self.duration = float(dur)
        return True
