"""Shared fixtures."""

import pytest

from api_client import Station

API_URL = "https://stations.example.test/"


def _build_station(station_id, lat, lon, **kwargs):
    return Station(
        id=station_id,
        name=kwargs.get("name", f"Station {station_id}"),
        comment=kwargs.get("comment"),
        status=kwargs.get("status", 1),
        latitude=lat,
        longitude=lon,
        measurements=kwargs.get("measurements", {}),
    )


@pytest.fixture
def make_station():
    return _build_station


@pytest.fixture
def api_url():
    return API_URL


@pytest.fixture
def station_payloads():
    return [
        {
            "id": 1,
            "name": "Grensásvegur",
            "comment": None,
            "status": 1,
            "latitude": "64.1306",
            "longitude": "-21.8770",
            "measurements": {"pm10": "12", "no2": None},
        },
        {
            "id": 2,
            "name": "Akureyri",
            "status": 2,
            "latitude": "65.6835",
            "longitude": "-18.0878",
            "measurements": {"pm10": "30.1", "temperature": "-2.5"},
        },
        {
            "id": 3,
            "name": "Hvaleyrarholt",
            "comment": "Mælir tímabundið óvirkur",
            "status": 3,
            "latitude": "64.0612",
            "longitude": "-21.9856",
            "measurements": {},
        },
    ]


@pytest.fixture
def reykjavik():
    from ranking import Coordinate

    return Coordinate(latitude=64.1466, longitude=-21.9426)
