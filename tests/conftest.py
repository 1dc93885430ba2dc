import pytest
import requests

from worship.dom import Element, Page
from worship.models import WidgetState
from worship.player_session import PlayerSession
from worship.track_loader import TrackListLoader


RECORDS = [
    {"youtubeVideoId": "vid-a", "title": "Amazing Grace", "position": 0},
    {"youtubeVideoId": "vid-b", "title": "How Great Thou Art", "position": 1},
    {"youtubeVideoId": "vid-c", "title": "Be Thou My Vision", "position": 2},
]


class FakeResponse:
    def __init__(self, data=None, status_code=200, bad_json=False):
        self.data = data
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.bad_json:
            raise ValueError("not json")
        return self.data


class FakeHttp:
    def __init__(self, data=None, response=None, exc=None):
        self.response = response or FakeResponse(data if data is not None else [])
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeWidget:
    def __init__(self, container, video_id, player_vars=None, on_ready=None, on_state_change=None):
        self.container = container
        self.video_id = video_id
        self.player_vars = player_vars
        self.on_ready = on_ready
        self.on_state_change = on_state_change
        self.calls = []
        self.failing = set()
        self.destroyed = False
        self.current_time = 0.0
        self.duration = 180.0

    def _record(self, name, *args):
        if name in self.failing:
            raise RuntimeError(f"{name} failed")
        self.calls.append((name,) + args)

    def called(self, name):
        return [c for c in self.calls if c[0] == name]

    # events driven by the test
    def fire_ready(self):
        self.on_ready(self)

    def fire(self, state):
        self.on_state_change(self, int(state))

    # widget surface
    def play_video(self):
        self._record("play_video")

    def pause_video(self):
        self._record("pause_video")

    def stop_video(self):
        self._record("stop_video")

    def seek_to(self, seconds, allow_seek_ahead):
        self._record("seek_to", seconds, allow_seek_ahead)

    def set_volume(self, volume):
        self._record("set_volume", volume)

    def get_volume(self):
        return 100

    def mute(self):
        self._record("mute")

    def unmute(self):
        self._record("unmute")

    def is_muted(self):
        return False

    def get_current_time(self):
        if "get_current_time" in self.failing:
            raise RuntimeError("get_current_time failed")
        return self.current_time

    def get_duration(self):
        return self.duration

    def get_player_state(self):
        return int(WidgetState.UNSTARTED)

    def destroy(self):
        self._record("destroy")
        self.destroyed = True


class FakeApi:
    def __init__(self):
        self.created = []

    def Player(self, container, **kwargs):
        widget = FakeWidget(container, **kwargs)
        self.created.append(widget)
        return widget


class CountingElement(Element):
    def __init__(self, name):
        super().__init__(name)
        self.appends = 0

    def append_child(self, child):
        self.appends += 1
        super().append_child(child)


def make_session(records=RECORDS, http=None, api=None):
    http = http or FakeHttp(records)
    api = api or FakeApi()
    session = PlayerSession(
        track_loader=TrackListLoader(url="http://test/api/worship-videos", http=http),
        fetch_api=lambda: api,
        page=Page(),
        poll_interval=60.0,
    )
    session.fake_api = api
    session.fake_http = http
    return session


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def session(api):
    """A mounted session over three tracks with its first widget built."""
    s = make_session(api=api)
    s.mount()
    assert s.api_loader.wait(2.0)
    yield s
    s.teardown()


def start_playing(session):
    widget = session.widget
    widget.fire_ready()
    session.play()
    widget.fire(WidgetState.PLAYING)
    return widget
