from sqlalchemy import inspect

from init_db import ensure_admin
from models.plan import Plan, UNLIMITED
from models.qrcode import QRCode
from models.user import User
from seeds.plans_seed import seed_plans


def test_required_tables_exist(session_local):
    engine = session_local.kw["bind"]
    tables = inspect(engine).get_table_names()

    required = ["users", "pricing_plans", "subscriptions", "qr_codes", "qr_scans"]
    missing = [t for t in required if t not in tables]
    assert not missing, f"❌ Fehlende Tabellen: {missing}"


def test_seed_plans_is_idempotent(session_local):
    with session_local() as db:
        assert seed_plans(db) == 3
        assert seed_plans(db) == 0

        plans = {p.slug: p for p in db.query(Plan).all()}
        assert set(plans) == {"free", "pro", "enterprise"}
        assert plans["free"].max_qr_codes == 5
        assert plans["pro"].scan_limit == 10000
        assert plans["enterprise"].max_qr_codes == UNLIMITED
        assert plans["enterprise"].allows_more_qr_codes(10_000)
        assert not plans["free"].allows_more_qr_codes(5)


def test_ensure_admin_promotes_existing_user(session_local, make_user):
    make_user(email="boss@example.com")
    with session_local() as db:
        assert ensure_admin(db, "boss@example.com") is False
        assert db.query(User).filter(User.email == "boss@example.com").one().is_admin
        assert ensure_admin(db, "new-admin@example.com") is True


def test_qr_type_is_stored_lowercase(session_local, make_user, make_qr):
    qr_id = make_qr(make_user(), qr_type="VCARD")
    with session_local() as db:
        assert db.get(QRCode, qr_id).type == "vcard"


def test_expiry_helpers(session_local, make_user, make_qr, past, future):
    user_id = make_user()
    with session_local() as db:
        expired = db.get(QRCode, make_qr(user_id, expires_at=past))
        running = db.get(QRCode, make_qr(user_id, expires_at=future))
        unlimited = db.get(QRCode, make_qr(user_id))

        assert expired.is_expired()
        assert not running.is_expired()
        assert not unlimited.is_expired()
