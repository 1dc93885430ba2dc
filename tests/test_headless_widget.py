import threading
import time

from worship.dom import Element, Page
from worship.headless_widget import HeadlessApi, HeadlessPlayer
from worship.models import WidgetState
from worship.player_session import PlayerSession
from worship.track_loader import TrackListLoader

from conftest import RECORDS, FakeHttp


class Clock:
    def __init__(self):
        self.now = 50.0

    def __call__(self):
        return self.now


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        time.sleep(0.005)
    return predicate()


def test_ready_fires_after_construction():
    ready = threading.Event()
    container = Element("c")
    player = HeadlessPlayer(container, "vid-a", on_ready=lambda target: ready.set())
    assert ready.wait(2.0)
    assert player.frame.parent is container
    player.destroy()


def test_play_pause_and_position():
    clock = Clock()
    states = []
    player = HeadlessPlayer(
        Element("c"),
        "vid-a",
        on_state_change=lambda target, state: states.append(state),
        duration=100,
        clock=clock,
    )
    player.play_video()
    clock.now += 12
    assert player.get_current_time() == 12
    player.pause_video()
    clock.now += 30
    assert player.get_current_time() == 12
    assert states == [WidgetState.PLAYING, WidgetState.PAUSED]
    player.destroy()


def test_seek_clamps_to_duration():
    player = HeadlessPlayer(Element("c"), "vid-a", duration=100)
    player.seek_to(500, True)
    assert player.get_current_time() == 100
    player.seek_to(-5, True)
    assert player.get_current_time() == 0
    player.destroy()


def test_ended_reported_at_duration():
    states = []
    player = HeadlessPlayer(
        Element("c"),
        "vid-a",
        on_state_change=lambda target, state: states.append(state),
        duration=0.02,
    )
    player.play_video()
    assert wait_for(lambda: WidgetState.ENDED in states)
    player.destroy()


def test_destroy_stops_everything():
    container = Element("c")
    states = []
    player = HeadlessPlayer(
        container,
        "vid-a",
        on_state_change=lambda target, state: states.append(state),
        duration=0.02,
    )
    player.play_video()
    player.destroy()
    time.sleep(0.05)
    assert states == [WidgetState.PLAYING]
    assert container.children == []
    assert player.destroyed


def test_volume_and_mute():
    player = HeadlessPlayer(Element("c"), "vid-a")
    player.set_volume(140)
    assert player.get_volume() == 100
    player.mute()
    assert player.is_muted()
    player.unmute()
    assert not player.is_muted()
    player.destroy()


def test_session_advances_through_headless_tracks():
    session = PlayerSession(
        track_loader=TrackListLoader(url="http://test", http=FakeHttp(RECORDS)),
        fetch_api=lambda: HeadlessApi(track_seconds=0.5),
        page=Page(),
        poll_interval=60.0,
    )
    try:
        session.mount()
        assert session.api_loader.wait(2.0)
        assert wait_for(lambda: session.player_ready)
        session.play()
        assert wait_for(lambda: session.current_index == 1)
        assert wait_for(lambda: session.is_playing and session.current_index >= 1)
        with session.lock:
            assert session.widget.video_id == session.current_track.identifier
    finally:
        session.teardown()
