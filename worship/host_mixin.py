import weakref
from typing import Optional

from .dom import Element

HOST_KINDS = ("main", "mini")


class HostMixin:
    @property
    def show_mini_player(self) -> bool:
        return (
            self.mini_player_activated
            and not self.main_player_visible
            and not self.mini_player_dismissed
        )

    def register_host(self, kind: str, element: Element) -> None:
        if kind not in HOST_KINDS:
            raise ValueError(f"unknown host kind: {kind!r}")
        with self.lock:
            self._hosts[kind] = weakref.ref(element)
            self._append_log(f"Host registered: {kind} ({element.name})")
            self._relocate_unlocked()

    def unregister_host(self, kind: str, element: Optional[Element] = None) -> None:
        """
        Forget the ``kind`` host. With ``element`` given, only that element
        is forgotten, so a late unmount cannot drop a newer registration.
        """
        with self.lock:
            current = self._host(kind)
            if element is not None and current is not element:
                return
            self._hosts.pop(kind, None)
            self._append_log(f"Host unregistered: {kind}")
            self._relocate_unlocked()

    def set_main_player_visible(self, visible: bool) -> None:
        with self.lock:
            self.main_player_visible = bool(visible)
            self._relocate_unlocked()

    def dismiss_mini_player(self) -> None:
        with self.lock:
            self._append_log("Mini player dismissed")
            self._auto_play_on_ready = False
            if self._widget is not None:
                self._widget_call("pausing on dismiss", self._widget.pause_video)
            self.is_playing = False
            self._stop_polling_unlocked()
            self.mini_player_dismissed = True
            self.mini_player_activated = False
            self._relocate_unlocked()

    def relocate(self) -> bool:
        with self.lock:
            return self._relocate_unlocked()

    # ---------- internal helpers ----------

    def _host(self, kind: str) -> Optional[Element]:
        ref = self._hosts.get(kind)
        if ref is None:
            return None
        element = ref()
        if element is None:
            # the view that supplied it is gone
            del self._hosts[kind]
        return element

    def _relocate_unlocked(self) -> bool:
        """
        Attach the container to the host the visibility state selects, or
        park it detached. Returns True only if the tree changed.
        Caller must hold self.lock.
        """
        if self.main_player_visible:
            kind = "main"
        elif self.show_mini_player:
            kind = "mini"
        else:
            kind = None
        target = self._host(kind) if kind else None
        parent = self.container.parent

        if target is None:
            if parent is None:
                return False
            self.container.detach()
            self._append_log("Player detached")
            return True
        if parent is target:
            return False
        target.append_child(self.container)
        self._append_log(f"Player moved to {kind} host")
        return True
