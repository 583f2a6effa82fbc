"""Tests for the command-line entry point."""

import json

import pytest

import main

STATIONS = [
    {"id": 2, "name": "Akureyri", "status": 2, "latitude": "65.6835", "longitude": "-18.0878", "measurements": {}},
    {"id": 1, "name": "Grensásvegur", "comment": None, "status": 1, "latitude": "64.1306", "longitude": "-21.8770", "measurements": {}},
]


class TestMain:
    def test_ranked_json_output(self, requests_mock, api_url, capsys):
        requests_mock.get(api_url, json=STATIONS)
        exit_code = main.main(["--url", api_url, "--lat", "64.1466", "--lon", "-21.9426", "--json"])
        records = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert [r["id"] for r in records] == [1, 2]
        assert records[0]["distance_km"] < records[1]["distance_km"]

    def test_without_location_keeps_server_order(self, requests_mock, api_url, capsys):
        requests_mock.get(api_url, json=STATIONS)
        assert main.main(["--url", api_url, "--json"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in records] == [2, 1]
        assert records[0]["distance_km"] is None

    def test_limit(self, requests_mock, api_url, capsys):
        requests_mock.get(api_url, json=STATIONS)
        main.main(["--url", api_url, "--lat", "64.1466", "--lon", "-21.9426", "--limit", "1"])
        out = capsys.readouterr().out
        assert "Grensásvegur" in out
        assert "Akureyri" not in out

    def test_fetch_failure_exit_code(self, requests_mock, api_url, capsys):
        requests_mock.get(api_url, status_code=500)
        assert main.main(["--url", api_url]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_lat_without_lon(self, api_url):
        with pytest.raises(SystemExit):
            main.main(["--url", api_url, "--lat", "64.0"])
