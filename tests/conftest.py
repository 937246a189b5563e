import base64
import json
import os
import sys
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport
from itsdangerous import TimestampSigner
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Tests laufen nie gegen MySQL
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SITE_URL", "https://qrcodeshine.com")

import config  # noqa: E402
import models  # noqa: E402,F401
from auth_utils import get_auth_client  # noqa: E402
from database import Base, get_db, get_session_factory  # noqa: E402
from main import app  # noqa: E402
from models.plan import Plan  # noqa: E402
from models.qrcode import QRCode  # noqa: E402
from models.user import User  # noqa: E402
from utils.geolocation import GeoLocation, get_geo_resolver  # noqa: E402


class FakeGeoResolver:
    """Ersetzt ip-api.com in Endpunkt-Tests."""

    def __init__(self, location=GeoLocation(country="Germany", city="Berlin")):
        self.location = location
        self.calls = []

    async def locate(self, ip):
        self.calls.append(ip)
        return self.location


@pytest.fixture
def session_local(tmp_path):
    # Datei statt :memory:, weil Hintergrundjobs aus eigenen Threads schreiben
    engine = create_engine(
        f"sqlite:///{tmp_path / 'qrshine_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield testing_session_local
    engine.dispose()


@pytest.fixture
def geo():
    return FakeGeoResolver()


@pytest.fixture
def client(session_local, geo):
    def override_get_db():
        db = session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_local
    app.dependency_overrides[get_geo_resolver] = lambda: geo
    app.dependency_overrides[get_auth_client] = lambda: None

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(client):
    """Async-Client auf denselben Overrides wie `client`."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# -------------------------------------------------------------------------
# Testdaten
# -------------------------------------------------------------------------
@pytest.fixture
def make_user(session_local):
    counter = {"n": 0}

    def _make_user(role="user", plan="free", **kwargs):
        counter["n"] += 1
        with session_local() as db:
            user = User(
                email=kwargs.pop("email", f"user{counter['n']}@example.com"),
                full_name=kwargs.pop("full_name", f"User {counter['n']}"),
                role=role,
                plan=plan,
                **kwargs,
            )
            db.add(user)
            db.commit()
            return user.id

    return _make_user


@pytest.fixture
def make_qr(session_local):
    def _make_qr(user_id, qr_type="url", content=None, **kwargs):
        with session_local() as db:
            qr = QRCode(
                user_id=user_id,
                type=qr_type,
                name=kwargs.pop("name", f"{qr_type} test"),
                content=content if content is not None else "https://example.com",
                settings=kwargs.pop("settings", {}),
                **kwargs,
            )
            db.add(qr)
            db.commit()
            return qr.id

    return _make_qr


@pytest.fixture
def make_plan(session_local):
    def _make_plan(slug="free", **kwargs):
        with session_local() as db:
            plan = Plan(slug=slug, name=kwargs.pop("name", slug.title()), **kwargs)
            db.add(plan)
            db.commit()
            return plan.slug

    return _make_plan


def login_as(test_client, user_id):
    """Setzt ein signiertes Session-Cookie wie die SessionMiddleware."""
    data = base64.b64encode(json.dumps({"user_id": user_id}).encode("utf-8"))
    signed = TimestampSigner(str(config.SESSION_SECRET)).sign(data)
    test_client.cookies.set(config.SESSION_COOKIE_NAME, signed.decode("utf-8"))


@pytest.fixture
def login():
    return login_as


def days_from_now(days):
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
def past():
    return days_from_now(-1)


@pytest.fixture
def future():
    return days_from_now(30)
