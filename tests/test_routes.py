"""
Integration tests for the JSON API (trm.routes)
===============================================

Flask test client on top of the in-memory database; notifications are
mocked and photos go to a temporary upload directory.
"""

# =========================
# Imports
# =========================
import io
from unittest.mock import MagicMock
import pytest
from config import PLACEHOLDER_IMAGES, BROKEN_PHOTO_URL
from trm.app import create_app
from trm.validation import to_wire, DatePolicy


# -------------------------
# Fixtures
# -------------------------
@pytest.fixture
def app(session_factory, notifier, photo_store):
    app = create_app(session_factory, notifier=notifier,
                     photo_store=photo_store, date_policy=DatePolicy.ANY)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def payload(valid_form):
    return to_wire(valid_form)


def _as(role):
    return {"X-Actor-Role": role}


def _create(client, payload, **overrides):
    resp = client.post("/api/tire-requests", json={**payload, **overrides})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


# -------------------------
# Tests: Health / Session
# -------------------------
def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_session_role_wins_over_header(client):
    resp = client.post("/api/session", json={"role": "Manager"})
    assert resp.get_json()["role"] == "manager"
    resp = client.get("/api/dashboard", headers=_as("tto"))
    assert resp.get_json()["role"] == "manager"


def test_session_requires_role(client):
    resp = client.post("/api/session", json={})
    assert resp.status_code == 400
    assert "role" in resp.get_json()["errors"]


# -------------------------
# Tests: Create / Read
# -------------------------
def test_create_and_get(client, payload):
    created = _create(client, payload, tirePhotoUrls=["a.jpg"])
    assert created["status"] == "PENDING"
    assert created["vehicleNo"] == "AB-1234"
    assert created["photoCandidates"][0][-1].startswith("/static/images/")

    resp = client.get(f"/api/tire-requests/{created['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["tirePhotoUrls"] == ["a.jpg"]


def test_create_invalid_returns_field_errors(client, payload):
    resp = client.post("/api/tire-requests",
                       json={**payload, "previousKm": "85000",
                             "presentKm": "75000"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert body["persisted"] is False
    assert set(body["errors"]) == {"previous_km", "present_km"}


def test_create_rejects_non_string_photo_refs(client, payload, repo):
    resp = client.post("/api/tire-requests",
                       json={**payload, "tirePhotoUrls": [{"x": 1}]})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert body["persisted"] is False
    assert body["retryable"] is False
    assert set(body["errors"]) == {"tire_photo_refs"}
    assert repo.list() == []

    resp = client.post("/api/tire-requests",
                       json={**payload, "tirePhotoUrls": ["a.jpg", ""]})
    assert resp.status_code == 400
    assert "tire_photo_refs" in resp.get_json()["errors"]


def test_create_multipart_with_photos(client, payload, photo_store):
    data = {k: str(v) for k, v in payload.items()}
    data["tirePhotos"] = [(io.BytesIO(b"jpeg-bytes"), "front tire.jpg")]
    resp = client.post("/api/tire-requests", data=data,
                       content_type="multipart/form-data")
    assert resp.status_code == 201, resp.get_json()
    refs = resp.get_json()["tirePhotoUrls"]
    assert len(refs) == 1 and refs[0].endswith("front_tire.jpg")

    served = client.get(f"/uploads/{refs[0]}")
    assert served.status_code == 200
    assert served.data == b"jpeg-bytes"


def test_rejected_upload_type(client, payload):
    data = {k: str(v) for k, v in payload.items()}
    data["tirePhotos"] = [(io.BytesIO(b"MZ"), "virus.exe")]
    resp = client.post("/api/tire-requests", data=data,
                       content_type="multipart/form-data")
    assert resp.status_code == 400
    assert "tire_photo_refs" in resp.get_json()["errors"]


def test_get_missing_is_404(client):
    resp = client.get("/api/tire-requests/999")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_fallback_images_are_served(client):
    for url in PLACEHOLDER_IMAGES + (BROKEN_PHOTO_URL,):
        resp = client.get(url)
        assert resp.status_code == 200, url
        assert resp.data


# -------------------------
# Tests: Approval chain
# -------------------------
def test_approval_scenario(client, payload):
    rid = _create(client, payload, previousKm="40000", presentKm="45000",
                  noOfTires="4")["id"]

    resp = client.post(f"/api/tire-requests/{rid}/approve",
                       headers=_as("manager"))
    assert resp.get_json()["status"] == "MANAGER_APPROVED"

    resp = client.post(f"/api/tire-requests/{rid}/reject", headers=_as("tto"),
                       json={"reason": ""})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "missing_reason"

    resp = client.post(f"/api/tire-requests/{rid}/reject", headers=_as("tto"),
                       json={"reason": "tire size mismatch"})
    assert resp.get_json()["status"] == "TTO_REJECTED"
    assert resp.get_json()["rejectReason"] == "tire size mismatch"

    resp = client.post(f"/api/tire-requests/{rid}/approve",
                       headers=_as("engineer"))
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "illegal_transition"


def test_dashboard_queues(client, payload):
    rid = _create(client, payload)["id"]
    body = client.get("/api/dashboard", headers=_as("manager")).get_json()
    assert [r["id"] for r in body["pending"]] == [rid]
    assert body["pending"][0]["availableActions"] == ["approve", "reject"]

    body = client.get("/api/dashboard", headers=_as("tto")).get_json()
    assert body["pending"] == []
    assert [r["id"] for r in body["processed"]] == [rid]


def test_list_search_and_sort(client, payload):
    _create(client, payload, vehicleNo="AAA-1", presentKm="9000",
            previousKm="10")
    _create(client, payload, vehicleNo="BBB-2", presentKm="10000",
            previousKm="10")
    rows = client.get("/api/tire-requests?sort=presentKm&dir=desc").get_json()
    assert [r["vehicleNo"] for r in rows] == ["BBB-2", "AAA-1"]
    rows = client.get("/api/tire-requests?q=aaa").get_json()
    assert [r["vehicleNo"] for r in rows] == ["AAA-1"]


# -------------------------
# Tests: Update / Delete
# -------------------------
def test_update_and_delete(client, payload):
    rid = _create(client, payload)["id"]
    resp = client.put(f"/api/tire-requests/{rid}",
                      json={**payload, "comments": "Rear axle"})
    assert resp.status_code == 200
    assert resp.get_json()["comments"] == "Rear axle"

    resp = client.delete(f"/api/tire-requests/{rid}", headers=_as("seller"))
    assert resp.status_code == 403

    resp = client.delete(f"/api/tire-requests/{rid}")
    assert resp.status_code == 200
    assert client.get(f"/api/tire-requests/{rid}").status_code == 404


def test_photo_removal_failure_keeps_committed_result(client, payload,
                                                     photo_store, monkeypatch):
    discard = MagicMock(side_effect=OSError("file in use"))
    monkeypatch.setattr(photo_store, "discard", discard)
    rid = _create(client, payload, tirePhotoUrls=["a.jpg"])["id"]

    resp = client.put(f"/api/tire-requests/{rid}",
                      json={**payload, "tirePhotoUrls": ["b.jpg"]})
    assert resp.status_code == 200
    assert resp.get_json()["tirePhotoUrls"] == ["b.jpg"]

    resp = client.delete(f"/api/tire-requests/{rid}")
    assert resp.status_code == 200
    assert resp.get_json()["deleted"] is True
    assert client.get(f"/api/tire-requests/{rid}").status_code == 404
    assert discard.call_count == 2


# -------------------------
# Tests: Export
# -------------------------
def test_export_csv(client, payload):
    _create(client, payload)
    resp = client.get("/api/tire-requests/export?format=csv")
    assert resp.status_code == 200
    text = resp.data.decode("utf-8")
    assert text.startswith("\ufeffid;vehicleNo;")
    assert "AB-1234" in text
    assert "attachment" in resp.headers["Content-Disposition"]


def test_export_xlsx(client, payload):
    _create(client, payload)
    resp = client.get("/api/tire-requests/export?format=xlsx")
    assert resp.status_code == 200
    assert resp.data[:2] == b"PK"


def test_export_unknown_format(client):
    resp = client.get("/api/tire-requests/export?format=pdf")
    assert resp.status_code == 400
