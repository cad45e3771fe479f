import pytest

from homebrew.routers.weather_reports import get_store
from homebrew.store import RecordStore
from homebrew.utils.auth_guard import SECRET_HEADER

from .conftest import API_KEY, FIXED_NOW
from .fakes import FakeConnection

URL = "/api/weather_reports"
METRICS = ("temperature", "humidity", "percipitation", "pm10", "pm25", "co2", "tvoc")


def test_ingest_json_scenario(client, auth):
    resp = client.post(URL, json={"temperature": 21.5, "device_type": "indoor"}, headers=auth)

    assert resp.status_code == 200
    body = resp.json()
    assert body["temperature"] == 21.5
    for name in METRICS[1:]:
        assert body[name] is None
    assert body["device_type"] == "indoor"
    assert body["oid"] == "oid0001"
    assert body["timestamp"] == FIXED_NOW
    assert body["id"] == 0


def test_ingest_form_encoded(client, auth):
    resp = client.post(URL, data={"device_type": "outdoor", "pm10": "12.5", "tvoc": ""}, headers=auth)

    assert resp.status_code == 200
    body = resp.json()
    assert body["pm10"] == 12.5
    assert body["tvoc"] is None


def test_same_oid_updates_are_merged(client, auth, store):
    first = client.post(URL, json={"oid": "station-7", "device_type": "outdoor", "temperature": 20}, headers=auth)
    second = client.post(URL, json={"oid": "station-7", "device_type": "outdoor", "humidity": 55}, headers=auth)
    assert first.status_code == second.status_code == 200

    latest = client.get(URL, headers=auth).json()
    assert latest["oid"] == "station-7"
    assert latest["temperature"] == 20.0
    assert latest["humidity"] == 55.0
    assert len(store.query()) == 1


def test_latest_returns_most_recent(client, auth):
    client.post(URL, json={"device_type": "indoor", "co2": 600}, headers=auth)
    client.post(URL, json={"device_type": "outdoor", "co2": 410}, headers=auth)

    resp = client.get(URL, headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["oid"] == "oid0002"
    assert body["co2"] == 410.0
    assert body["id"] > 0


def test_latest_by_device_type(client, auth):
    client.post(URL, json={"device_type": "indoor", "temperature": 22}, headers=auth)
    client.post(URL, json={"device_type": "outdoor", "temperature": 5}, headers=auth)

    body = client.get(URL, params={"device_type": "indoor"}, headers=auth).json()
    assert body["temperature"] == 22.0


def test_latest_on_empty_store_is_no_content(client, auth):
    resp = client.get(URL, headers=auth)

    assert resp.status_code == 204
    assert resp.content == b""


@pytest.mark.parametrize("headers", [{}, {"Authorization": "wrong"}, {"Authorization": API_KEY.lower() + "x"}])
def test_bad_auth_looks_like_unknown_route(client, headers):
    unknown = client.get("/api/does_not_exist")

    for resp in (
        client.get(URL, headers=headers),
        client.post(URL, json={"device_type": "indoor"}, headers=headers),
        client.post(URL, json={"temperature": "garbage"}, headers=headers),
        client.post(URL, content=b"{not json", headers={**headers, "Content-Type": "application/json"}),
    ):
        assert resp.status_code == unknown.status_code == 404
        assert resp.json() == unknown.json()


def test_key_is_read_from_secret_header(client):
    assert SECRET_HEADER == "Authorization"
    assert client.get(URL, headers={SECRET_HEADER: API_KEY}).status_code == 204
    assert client.get(URL, headers={"X-Api-Key": API_KEY}).status_code == 404


@pytest.mark.parametrize("headers", [{}, {"Authorization": "wrong"}])
def test_other_methods_look_like_unknown_route(client, auth, headers):
    for method in ("PUT", "PATCH", "DELETE", "OPTIONS"):
        unknown = client.request(method, "/api/does_not_exist")
        for sent in (headers, auth):
            resp = client.request(method, URL, json={"device_type": "indoor"}, headers=sent)
            assert resp.status_code == unknown.status_code == 404
            assert resp.json() == unknown.json()
    assert client.head(URL, headers=headers).status_code == 404


def test_deeply_nested_body_is_rejected_after_auth(client, auth):
    nested = b"[" * 200_000
    unknown = client.get("/api/does_not_exist")

    resp = client.post(URL, content=nested, headers={"Content-Type": "application/json"})
    assert resp.status_code == 404
    assert resp.json() == unknown.json()

    resp = client.post(URL, content=nested, headers={**auth, "Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "body"


def test_boolean_metric_is_client_error(client, auth, store):
    resp = client.post(URL, json={"device_type": "indoor", "temperature": True}, headers=auth)

    assert resp.status_code == 400
    assert resp.json()["field"] == "temperature"
    assert store.query() == []


def test_overlong_device_type_is_client_error(client, auth, store):
    resp = client.post(URL, json={"device_type": "x" * 33}, headers=auth)

    assert resp.status_code == 400
    assert resp.json()["field"] == "device_type"
    assert store.query() == []


def test_missing_device_type_is_client_error(client, auth):
    resp = client.post(URL, json={"temperature": 1.0}, headers=auth)

    assert resp.status_code == 400
    assert resp.json()["field"] == "device_type"


def test_malformed_number_is_client_error(client, auth):
    resp = client.post(URL, json={"device_type": "indoor", "humidity": "damp"}, headers=auth)

    assert resp.status_code == 400
    assert resp.json()["field"] == "humidity"


def test_unparseable_body_is_client_error(client, auth):
    resp = client.post(URL, content=b"{not json", headers={**auth, "Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["field"] == "body"


def test_storage_failure_is_server_error(client, auth):
    client.app.dependency_overrides[get_store] = lambda: RecordStore(FakeConnection(fail_on="SELECT"))

    assert client.post(URL, json={"device_type": "indoor"}, headers=auth).status_code == 500
    resp = client.get(URL, headers=auth)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Storage unavailable"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
