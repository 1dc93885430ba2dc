import requests

from worship.track_loader import TrackListLoader

from conftest import RECORDS, FakeHttp, FakeResponse


class Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_tracks_parsed_in_position_order():
    records = list(reversed(RECORDS))
    loader = TrackListLoader(url="http://x", http=FakeHttp(records))

    tracks = loader.get()

    assert [t.identifier for t in tracks] == ["vid-a", "vid-b", "vid-c"]
    assert tracks[0].title == "Amazing Grace"


def test_cached_within_ttl_then_refetched():
    clock = Clock()
    http = FakeHttp(RECORDS)
    loader = TrackListLoader(url="http://x", ttl=300, http=http, clock=clock)

    loader.get()
    clock.now += 299
    loader.get()
    assert len(http.calls) == 1
    assert loader.is_fresh()

    clock.now += 2
    loader.get()
    assert len(http.calls) == 2


def test_timeout_passed_to_http():
    http = FakeHttp(RECORDS)
    loader = TrackListLoader(url="http://x", timeout=7, http=http)
    loader.get()
    assert http.calls == [("http://x", 7)]


def test_network_failure_is_empty_and_not_cached():
    lines = []
    http = FakeHttp(exc=requests.ConnectionError("down"))
    loader = TrackListLoader(url="http://x", http=http, log=lines.append)

    assert loader.get() == ()
    assert loader.get() == ()
    assert len(http.calls) == 2
    assert not loader.is_fresh()
    assert any("fetch failed" in line for line in lines)


def test_http_error_status_is_empty():
    http = FakeHttp(response=FakeResponse([], status_code=500))
    loader = TrackListLoader(url="http://x", http=http)
    assert loader.get() == ()


def test_malformed_body_is_empty():
    assert TrackListLoader(url="http://x", http=FakeHttp(response=FakeResponse(bad_json=True))).get() == ()
    assert TrackListLoader(url="http://x", http=FakeHttp({"tracks": []})).get() == ()


def test_duplicates_and_bad_records_dropped():
    records = RECORDS + [
        {"youtubeVideoId": "vid-a", "title": "Again", "position": 9},
        {"title": "No id", "position": 3},
        "junk",
    ]
    tracks = TrackListLoader(url="http://x", http=FakeHttp(records)).get()
    assert [t.identifier for t in tracks] == ["vid-a", "vid-b", "vid-c"]
    assert tracks[0].title == "Amazing Grace"


def test_invalidate_forces_refetch():
    http = FakeHttp(RECORDS)
    loader = TrackListLoader(url="http://x", http=http)
    loader.get()
    loader.invalidate()
    loader.get()
    assert len(http.calls) == 2


def test_failed_refetch_keeps_last_good_list():
    clock = Clock()
    http = FakeHttp(RECORDS)
    loader = TrackListLoader(url="http://x", ttl=300, http=http, clock=clock)
    first = loader.get()

    clock.now += 301
    http.exc = requests.ConnectionError("blip")
    assert loader.get() == first
    assert not loader.is_fresh()

    http.exc = None
    http.response.data = RECORDS[:1]
    assert [t.identifier for t in loader.get()] == ["vid-a"]
    assert len(http.calls) == 3


def test_invalidate_then_failure_keeps_list():
    http = FakeHttp(RECORDS)
    loader = TrackListLoader(url="http://x", http=http)
    first = loader.get()
    loader.invalidate()
    http.exc = requests.Timeout("slow")
    assert loader.get() == first
