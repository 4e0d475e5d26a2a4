import pytest
from fastapi.testclient import TestClient

from planetgen.server.server import create_app
from planetgen.utils.config import ServerConfig


@pytest.fixture
def static_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>Planet Generator</body></html>")
    (tmp_path / "app.js").write_text("console.log('hi');")
    return tmp_path


@pytest.fixture
def client(static_dir):
    app = create_app(ServerConfig(static_dir=static_dir, log_file=None))
    with TestClient(app) as test_client:
        yield test_client


def test_index_and_static_files(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Planet Generator" in response.text
    assert client.get("/app.js").status_code == 200


def test_missing_static_dir_only_loses_the_page(tmp_path):
    app = create_app(ServerConfig(static_dir=tmp_path / "missing", log_file=None))
    with TestClient(app) as client:
        assert client.get("/").status_code == 404
        assert client.get("/test-settings").status_code == 200


def test_test_settings(client):
    response = client.get("/test-settings")
    assert response.status_code == 200
    assert response.json()["seed"] == "default"
    assert response.json()["sector"]["hex_size"] == [10, 10, 10]


def test_test_system(client):
    body = client.get("/test-system").json()
    assert body["name"] == "Octupla"
    root = next(point for point in body["all_objects"] if point["id"] == body["center_id"])
    assert root["object"] == "Void"
    assert root["primary_body_id"] is None


def test_universe_endpoint(client):
    first = client.post("/universe", json={"seed": "default"})
    second = client.post("/universe", json={"seed": "default"})
    assert first.status_code == 200
    assert first.json() == second.json()


def test_universe_endpoint_without_body(client):
    response = client.post("/universe")
    assert response.status_code == 200
    assert response.json()["seed"]


def test_galaxy_endpoint(client):
    response = client.post("/galaxy", json={"seed": "default"})
    assert response.status_code == 200
    body = response.json()
    assert body["explored_hexes"] == []
    assert body["extent"]["min"]["x"] <= 0 <= body["extent"]["max"]["x"]


def test_system_endpoint(client):
    response = client.post(
        "/system",
        json={"settings": {"seed": "default"}, "coordinates": {"x": 0, "y": 0, "z": 0}},
    )
    assert response.status_code == 200
    body = response.json()
    star = next(point for point in body["all_objects"] if point["id"] == body["main_star_id"])
    assert list(star["object"]) == ["Star"]


def test_invalid_settings_are_400(client):
    response = client.post("/universe", json={"universe": {"age": 1000}})
    assert response.status_code == 400
    assert response.json()["code"] == "configuration_error"
    assert "universe.age" in response.json()["detail"]


def test_non_object_body_is_400(client):
    response = client.post("/galaxy", json=[1, 2, 3])
    assert response.status_code == 400
    assert response.json()["code"] == "configuration_error"


def test_unknown_coordinates_are_404(client):
    response = client.post(
        "/system",
        json={"settings": {"seed": "default"}, "coordinates": {"x": 10**9, "y": 0, "z": 0}},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_cors_headers(client):
    response = client.get("/test-settings", headers={"Origin": "http://example.test"})
    assert response.headers["access-control-allow-origin"] == "*"
