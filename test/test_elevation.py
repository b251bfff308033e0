import pytest

from floodguard import elevation
from floodguard.elevation import fetch_elevation
from floodguard.models import Coordinate


class Response:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


def test_open_meteo_list_payload(monkeypatch):
    monkeypatch.setattr(elevation.requests, "get", lambda *a, **k: Response({"elevation": [216.0]}))
    assert fetch_elevation(Coordinate(12.97, 79.16), source="open-meteo") == 216.0


def test_missing_value_is_none(monkeypatch):
    monkeypatch.setattr(elevation.requests, "get", lambda *a, **k: Response({"elevation": []}))
    assert fetch_elevation(Coordinate(12.97, 79.16), source="open-meteo") is None


def test_transport_error_is_none(monkeypatch):
    def broken(*a, **k):
        raise elevation.requests.ConnectionError("offline")

    monkeypatch.setattr(elevation.requests, "get", broken)
    assert fetch_elevation(Coordinate(12.97, 79.16), source="open-meteo") is None


def test_unknown_source():
    with pytest.raises(ValueError):
        fetch_elevation(Coordinate(0, 0), source="lidar")
