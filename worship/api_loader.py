import threading
from typing import Any, Callable, Dict, List, Optional

from .config import SCRIPT_LOAD_TIMEOUT, WIDGET_API_SRC
from .dom import Page


Listener = Callable[[Any], None]


class WidgetApiLoader:
    """
    Load the widget script at most once per page and tell every interested
    listener when it is ready.

    ``request(listener)`` fires the listener right away when the widget global
    already exists. Otherwise the listener waits for the one-shot "loaded"
    broadcast; a script tag is injected only if none with the same src is on
    the page yet. A load that fails or exceeds ``timeout`` drops its waiting
    listeners and removes the tag, so a later request starts over.
    """

    def __init__(
        self,
        page: Page,
        fetch_api: Callable[[], Any],
        src: str = WIDGET_API_SRC,
        global_name: str = "YT",
        timeout: float = SCRIPT_LOAD_TIMEOUT,
        log: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.page = page
        self.fetch_api = fetch_api
        self.src = src
        self.global_name = global_name
        self.timeout = timeout
        self._log = log or (lambda msg: None)
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._loading = False
        self._settled = threading.Event()

    @property
    def api(self) -> Any:
        return self.page.globals.get(self.global_name)

    @property
    def loaded(self) -> bool:
        return self.api is not None

    def request(self, listener: Listener) -> None:
        with self._lock:
            api = self.api
            if api is None:
                self._listeners.append(listener)
                start = not self._loading and not self.page.has_script(self.src)
                if start:
                    self.page.add_script(self.src)
                    self._loading = True
                    self._settled.clear()
        if api is not None:
            self._notify(listener, api)
            return
        if start:
            self._log(f"Injecting widget script {self.src}")
            threading.Thread(target=self._load, daemon=True).start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current load settles; returns whether the API is loaded."""
        if self.loaded:
            return True
        self._settled.wait(timeout)
        return self.loaded

    def _load(self) -> None:
        box: Dict[str, Any] = {}

        def run() -> None:
            try:
                box["api"] = self.fetch_api()
            except Exception as e:
                box["error"] = e

        worker = threading.Thread(target=run, daemon=True)
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            self._fail(f"Widget script did not load within {self.timeout:.0f}s")
        elif "error" in box:
            self._fail(f"Widget script failed to load: {box['error']!r}")
        elif box.get("api") is None:
            self._fail("Widget script loaded but defined no API")
        else:
            self._resolve(box["api"])

    def _resolve(self, api: Any) -> None:
        with self._lock:
            self.page.globals[self.global_name] = api
            listeners, self._listeners = self._listeners, []
            self._loading = False
        self._log(f"Widget API ready; notifying {len(listeners)} listener(s)")
        for listener in listeners:
            self._notify(listener, api)
        self._settled.set()

    def _fail(self, msg: str) -> None:
        self._log(msg)
        with self._lock:
            self._listeners = []
            self._loading = False
            if self.page.has_script(self.src):
                self.page.scripts.remove(self.src)
        self._settled.set()

    def _notify(self, listener: Listener, api: Any) -> None:
        try:
            listener(api)
        except Exception as e:
            self._log(f"Widget API listener failed: {e!r}")
