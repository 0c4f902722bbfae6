from datetime import datetime

from fastapi.testclient import TestClient

from photo_api.app.services import ingestion_service


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_info_for_stored_image(client, store):
    store.put("file-1-2.jpg", b"0123456789")
    resp = client.get("/api/info/file-1-2.jpg")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["filename"] == "file-1-2.jpg"
    assert body["size"] == 10
    assert "created" in body and "modified" in body


def test_info_missing_file(client):
    resp = client.get("/api/info/nonexistent.jpg")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "File not found"}


def test_info_rejects_traversal_as_not_found(client):
    resp = client.get("/api/info/..%5Csecret")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "File not found"}


def test_delete_by_url(client, store):
    store.put("base64-1-2.jpg", b"x")
    resp = client.request("DELETE", "/api/delete", json={"imageUrl": "http://testserver/base64-1-2.jpg"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert not store.exists("base64-1-2.jpg")


def test_delete_nonexistent_is_success(client):
    resp = client.request("DELETE", "/api/delete", json={"imageUrl": "http://host/nonexistent.jpg"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}


def test_delete_twice_reports_success(client, store):
    store.put("a.jpg", b"x")
    for _ in range(2):
        resp = client.request("DELETE", "/api/delete", json={"imageUrl": "a.jpg"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True}


def test_delete_missing_image_url(client):
    resp = client.request("DELETE", "/api/delete", json={})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing imageUrl"}


def test_delete_without_body(client):
    resp = client.request("DELETE", "/api/delete")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing imageUrl"


def test_delete_rejects_encoded_traversal(client, settings, store):
    outside = settings.upload_dir.parent / "keep.jpg"
    outside.write_bytes(b"keep")
    resp = client.request("DELETE", "/api/delete", json={"imageUrl": "http://host/..%2Fkeep.jpg"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid filename"}
    assert outside.exists()


def test_delete_with_wrong_body_shape(client):
    resp = client.request("DELETE", "/api/delete", json=["not", "an", "object"])
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request payload."


def test_unknown_static_file_is_404(client):
    resp = client.get("/missing.jpg")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_unhandled_error_is_generic_500(app, monkeypatch):
    async def exploding_ingest(request, store, settings):
        raise RuntimeError("secret /var/data path")

    monkeypatch.setattr(ingestion_service, "ingest", exploding_ingest)
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.post("/api/upload", json={"base64Data": "aGk=", "clientId": "c1", "type": "progress"})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}
    assert "secret" not in resp.text


def test_cors_headers(client):
    resp = client.get("/health", headers={"Origin": "http://app.example"})
    assert resp.headers.get("access-control-allow-origin") == "*"
