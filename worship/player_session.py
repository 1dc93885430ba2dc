"""
Composite PlayerSession assembled from smaller mixins.

One session per page lifetime: it owns the track list, the single playback
widget and its container, and moves that container between the main and mini
hosts without ever rebuilding the widget for a move.
"""

from .base_state import BaseState
from .logging_mixin import LoggingMixin
from .lifecycle_mixin import LifecycleMixin
from .polling_mixin import PollingMixin
from .control_mixin import ControlMixin
from .host_mixin import HostMixin


class PlayerSession(
    BaseState,
    LoggingMixin,
    LifecycleMixin,
    PollingMixin,
    ControlMixin,
    HostMixin,
):
    """Worship player session state and control logic."""
