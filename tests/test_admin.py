from models.plan import Plan
from models.qr_scan import QRScan
from models.qrcode import QRCode
from models.user import User


def test_admin_routes_reject_regular_users(client, make_user, make_qr, login):
    user_id = make_user()
    qr_id = make_qr(user_id)
    login(client, user_id)

    assert client.patch(f"/api/admin/qr/{qr_id}/featured").status_code == 403
    assert client.delete(f"/api/admin/qr/{qr_id}").status_code == 403
    assert client.get("/api/admin/plan-limits").status_code == 403


def test_admin_routes_reject_anonymous(client):
    assert client.get("/api/admin/plan-limits").status_code == 403


def test_featured_toggle_and_explicit_value(client, session_local, make_user, make_qr, login):
    admin_id = make_user(role="admin")
    qr_id = make_qr(make_user())
    login(client, admin_id)

    toggled = client.patch(f"/api/admin/qr/{qr_id}/featured")
    assert toggled.status_code == 200
    assert toggled.json()["qrCode"]["is_featured"] is True

    explicit = client.patch(f"/api/admin/qr/{qr_id}/featured", json={"is_featured": True})
    assert explicit.json()["qrCode"]["is_featured"] is True

    toggled_back = client.patch(f"/api/admin/qr/{qr_id}/featured", json={})
    assert toggled_back.json()["qrCode"]["is_featured"] is False


def test_admin_deletes_any_qr(client, session_local, make_user, make_qr, login):
    qr_id = make_qr(make_user())
    login(client, make_user(role="admin"))

    assert client.delete(f"/api/admin/qr/{qr_id}").json() == {"success": True}
    with session_local() as db:
        assert db.get(QRCode, qr_id) is None


def test_deleting_user_cascades_to_codes_and_scans(client, session_local, make_user, make_qr, login):
    victim = make_user()
    qr_ids = [make_qr(victim), make_qr(victim)]
    client.get(f"/r/{qr_ids[0]}", follow_redirects=False)
    login(client, make_user(role="admin"))

    response = client.delete(f"/api/admin/users/{victim}")

    assert response.status_code == 200
    with session_local() as db:
        assert db.get(User, victim) is None
        assert db.query(QRCode).filter(QRCode.id.in_(qr_ids)).count() == 0
        assert db.query(QRScan).count() == 0


def test_admin_cannot_delete_self(client, make_user, login):
    admin_id = make_user(role="admin")
    login(client, admin_id)

    assert client.delete(f"/api/admin/users/{admin_id}").status_code == 400


def test_plan_limits_read_and_update(client, session_local, make_user, make_plan, login):
    make_plan("free", max_qr_codes=5, scan_limit=100, sort_order=1)
    make_plan("pro", max_qr_codes=50, scan_limit=10000, sort_order=2)
    login(client, make_user(role="admin"))

    limits = client.get("/api/admin/plan-limits").json()["planLimits"]
    assert [p["plan"] for p in limits] == ["free", "pro"]
    assert limits[0]["max_scans_per_month"] == 100

    response = client.put("/api/admin/plan-limits/free", json={"max_qr_codes": 10, "max_scans_per_month": 500})

    assert response.status_code == 200
    assert response.json()["planLimits"]["max_qr_codes"] == 10
    with session_local() as db:
        plan = db.get(Plan, "free")
        assert (plan.max_qr_codes, plan.scan_limit) == (10, 500)


def test_plan_limits_unknown_slug(client, make_user, login):
    login(client, make_user(role="admin"))
    assert client.put("/api/admin/plan-limits/gold", json={"max_qr_codes": 1}).status_code == 404
