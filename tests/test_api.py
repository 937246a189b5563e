from __future__ import annotations

from datetime import timedelta

from models.qrcode import QRCode, as_utc, utc_now
from models.subscription import Subscription


def _payload(**overrides):
    data = {
        "name": "Website",
        "type": "URL",
        "content": {"encoded": "https://qrcodeshine.com/r/x", "raw": {"url": "https://a.com"}, "originalUrl": "https://a.com"},
        "settings": {"fgColor": "#000000", "size": 256},
    }
    data.update(overrides)
    return data


def test_api_requires_login(client):
    assert client.get("/api/qr").status_code == 401
    assert client.post("/api/qr", json=_payload()).status_code == 401
    assert client.get("/api/analytics").status_code == 401


def test_create_and_list_qr(client, session_local, make_user, login):
    user_id = make_user()
    login(client, user_id)

    response = client.post("/api/qr", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "QR code saved successfully"
    assert body["qrCode"]["type"] == "url"
    assert body["qrCode"]["scan_count"] == 0
    assert body["qrCode"]["is_active"] is True

    listed = client.get("/api/qr").json()["qrCodes"]
    assert [qr["id"] for qr in listed] == [body["qrCode"]["id"]]


def test_create_rejects_unknown_type(client, make_user, login):
    login(client, make_user())

    response = client.post("/api/qr", json=_payload(type="hologram"))

    assert response.status_code == 400


def test_default_limit_without_plan_row(client, make_user, make_qr, login):
    user_id = make_user()
    for _ in range(5):
        make_qr(user_id)
    login(client, user_id)

    response = client.post("/api/qr", json=_payload())

    assert response.status_code == 403
    assert "limit" in response.json()["detail"].lower()


def test_plan_limit_and_duration(client, session_local, make_user, make_qr, make_plan, login):
    make_plan("pro", max_qr_codes=2, qr_duration_days=30)
    user_id = make_user(plan="pro")
    login(client, user_id)

    first = client.post("/api/qr", json=_payload())
    assert first.status_code == 201
    with session_local() as db:
        qr = db.get(QRCode, first.json()["qrCode"]["id"])
        delta = as_utc(qr.expires_at) - utc_now()
    assert timedelta(days=29) < delta <= timedelta(days=30)

    assert client.post("/api/qr", json=_payload()).status_code == 201
    assert client.post("/api/qr", json=_payload()).status_code == 403


def test_unlimited_plan_via_subscription(client, session_local, make_user, make_qr, make_plan, login):
    make_plan("free", max_qr_codes=1)
    make_plan("enterprise", max_qr_codes=-1)
    user_id = make_user(plan="free")
    with session_local() as db:
        db.add(Subscription(user_id=user_id, plan_slug="enterprise", status="active"))
        db.commit()
    for _ in range(3):
        make_qr(user_id)
    login(client, user_id)

    assert client.post("/api/qr", json=_payload()).status_code == 201


def test_duplicate_short_code_conflicts(client, make_user, make_qr, login):
    user_id = make_user()
    make_qr(user_id, short_code="taken")
    login(client, user_id)

    response = client.post("/api/qr", json=_payload(short_code="taken"))

    assert response.status_code == 409


def test_update_changes_target_but_keeps_encoded(client, session_local, make_user, make_qr, login):
    user_id = make_user()
    qr_id = make_qr(
        user_id,
        content={"encoded": "https://qrcodeshine.com/r/abc", "raw": {"url": "https://old.com"}, "originalUrl": "https://old.com"},
    )
    login(client, user_id)

    response = client.put(f"/api/qr/{qr_id}", json={"content": "https://new.com", "name": "Neu"})

    assert response.status_code == 200
    content = response.json()["qrCode"]["content"]
    assert content["encoded"] == "https://qrcodeshine.com/r/abc"
    assert content["originalUrl"] == "https://new.com"
    assert response.json()["qrCode"]["name"] == "Neu"

    redirect = client.get(f"/r/{qr_id}", follow_redirects=False)
    assert redirect.headers["location"] == "https://new.com"


def test_update_app_type_replaces_raw(client, make_user, make_qr, login):
    user_id = make_user()
    qr_id = make_qr(
        user_id,
        qr_type="app",
        content={"encoded": "https://qrcodeshine.com/r/app1", "raw": {"appName": "Alt"}, "originalUrl": "https://keep.com"},
    )
    login(client, user_id)

    response = client.put(f"/api/qr/{qr_id}", json={"raw_content": {"appName": "Neu"}})

    content = response.json()["qrCode"]["content"]
    assert content == {"encoded": "https://qrcodeshine.com/r/app1", "raw": {"appName": "Neu"}, "originalUrl": "https://keep.com"}


def test_foreign_qr_is_forbidden(client, make_user, make_qr, login):
    owner = make_user()
    qr_id = make_qr(owner)
    login(client, make_user())

    assert client.put(f"/api/qr/{qr_id}", json={"name": "x"}).status_code == 403
    assert client.patch(f"/api/qr/{qr_id}/toggle").status_code == 403
    assert client.delete(f"/api/qr/{qr_id}").status_code == 403


def test_missing_qr_is_404(client, make_user, login):
    login(client, make_user())
    assert client.delete("/api/qr/does-not-exist").status_code == 404


def test_toggle_deactivates_and_blocks_scans(client, session_local, make_user, make_qr, login):
    user_id = make_user()
    qr_id = make_qr(user_id)
    login(client, user_id)

    response = client.patch(f"/api/qr/{qr_id}/toggle")

    assert response.json() == {"success": True, "is_active": False}
    assert client.get(f"/r/{qr_id}", follow_redirects=False).status_code == 403
    with session_local() as db:
        assert db.get(QRCode, qr_id).scan_count == 0


def test_delete_removes_code(client, session_local, make_user, make_qr, login):
    user_id = make_user()
    qr_id = make_qr(user_id)
    login(client, user_id)

    assert client.delete(f"/api/qr/{qr_id}").json() == {"success": True}
    with session_local() as db:
        assert db.get(QRCode, qr_id) is None
