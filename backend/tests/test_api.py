"""
Tests for the map server endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from ais_reception.api.schemas import ErrorResponse
from ais_reception.flask_app import create_flask_app
from ais_reception.main import create_app
from ais_reception.models.record import Station
from ais_reception.services.analysis import run_analysis
from ais_reception.services.ingest import IngestOptions
from ais_reception.utils.sample_data import generate_beam_log


STATION = Station(lat=51.5, lon=-0.2)
API_KEY = "test-key"


@pytest.fixture
def result(tmp_path):
    """Analysis of a small beam log, distances between 5 and 30 nm."""
    generate_beam_log(tmp_path / "beam.json", STATION, n_records=120, seed=9)
    return run_analysis(tmp_path, IngestOptions(station=STATION), min_distance=5, max_distance=30)


@pytest.fixture
def client(result):
    return TestClient(create_app(result, API_KEY))


@pytest.fixture
def flask_client(result):
    return create_flask_app(result, API_KEY).test_client()


class TestCreateApp:
    """Tests for app construction."""

    def test_api_key_required(self, result):
        with pytest.raises(ValueError):
            create_app(result, "")

    def test_flask_api_key_required(self, result):
        with pytest.raises(ValueError):
            create_flask_app(result, None)


class TestFastAPIEndpoints:
    """Tests for the FastAPI map server."""

    def test_health_endpoint(self, client, result):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["file_count"] == 1
        assert data["sample_count"] == 120
        assert data["filtered_count"] == result.filtered.count

    def test_data_endpoint(self, client, result):
        """Only filtered positions reach the map."""
        response = client.get("/data")

        assert response.status_code == 200
        data = response.json()
        assert data["station"] == {"lat": 51.5, "lon": -0.2, "name": "Station"}
        assert len(data["positions"]) == result.filtered.count
        assert all(5 <= p["distance"] <= 30 for p in data["positions"])
        assert data["min_distance"] == 5
        assert data["max_distance"] == 30

        beam = data["beam_stats"]
        assert beam["total_count"] == result.filtered.count
        assert beam["percentile68"]["percentile"] == 0.68
        assert beam["percentile95"]["beam_width"] >= beam["percentile68"]["beam_width"]
        assert beam["max_distance"]["count"] == len(beam["max_distance"]["bearings"])

    def test_map_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "key=test-key" in response.text
        assert "const mapData = {" in response.text
        assert "__MAP_DATA__" not in response.text

    def test_unknown_route(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert set(response.json()) == {"detail"}

    def test_error_schema(self):
        assert set(ErrorResponse.model_fields) == {"detail"}


class TestFlaskEndpoints:
    """Tests for the Flask map server."""

    def test_health_endpoint(self, flask_client):
        response = flask_client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_data_matches_fastapi(self, flask_client, client):
        assert flask_client.get("/data").get_json() == client.get("/data").json()

    def test_map_page(self, flask_client):
        response = flask_client.get("/")

        assert response.status_code == 200
        assert response.content_type.startswith("text/html")
        assert b"key=test-key" in response.data

    def test_unknown_route(self, flask_client):
        response = flask_client.get("/nope")

        assert response.status_code == 404
        assert response.get_json() == {"detail": "Not found"}


class TestEmptyResult:
    """Map payload without any filtered positions."""

    def test_no_beam_stats(self, tmp_path):
        result = run_analysis(tmp_path, IngestOptions(station=STATION))
        data = TestClient(create_app(result, API_KEY)).get("/data").json()

        assert data["positions"] == []
        assert data["beam_stats"] is None
