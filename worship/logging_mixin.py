import time
from typing import List


class LoggingMixin:
    def _append_log(self, msg: str) -> None:
        """Timestamp ``msg`` into the session buffer, dropping the oldest lines."""
        line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {msg}"
        with self.lock:
            self._logs.append(line)
            overflow = len(self._logs) - self._log_max
            if overflow > 0:
                del self._logs[:overflow]

    def get_logs(self, limit: int = 200) -> List[str]:
        """Most recent ``limit`` lines, oldest first; ``limit <= 0`` means all."""
        with self.lock:
            lines = list(self._logs)
        return lines if limit <= 0 else lines[-limit:]

    def _widget_call(self, action: str, fn, *args):
        """
        Call a widget method, logging instead of raising if it fails.
        Returns the method's result, or None on failure.
        """
        try:
            return fn(*args)
        except Exception as e:
            self._append_log(f"Error {action}: {e!r}")
            return None
