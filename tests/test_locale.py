import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from utils.locale import LocaleMiddleware, blog_slug_for_locale, is_turkish_url, translate_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/fiyatlandirma", "/pricing"),
        ("/panel", "/dashboard"),
        ("/panel/analitik", "/dashboard/analytics"),
        ("/panel/abonelik", "/dashboard/subscription"),
        ("/panel/analitik/x", "/dashboard/analytics/x"),
        ("/panel/qr", "/dashboard/qr"),
        ("/qr-olusturucu/url", "/qr-generator/url"),
        ("/qr-olusturucu/arac-park", "/qr-generator/parking"),
        ("/giris", "/auth/login"),
        ("/pricing", "/pricing"),
        ("/ozelliklerx", "/ozelliklerx"),
    ],
)
def test_translate_path(path, expected):
    assert translate_path(path) == expected


def test_is_turkish_url():
    assert is_turkish_url("/iletisim")
    assert is_turkish_url("/qr-olusturucu/wifi")
    assert not is_turkish_url("/contact")


def test_blog_slug_for_locale():
    assert blog_slug_for_locale("wifi-qr-kod-olusturma", "en") == "wifi-qr-code-generator"
    assert blog_slug_for_locale("wifi-qr-code-generator", "tr") == "wifi-qr-kod-olusturma"
    assert blog_slug_for_locale("unknown-post", "en") is None


@pytest.fixture
def locale_client():
    app = FastAPI()
    app.add_middleware(LocaleMiddleware)

    @app.get("/pricing")
    def pricing(request: Request):
        return {"path": request.url.path, "locale": request.state.locale}

    @app.get("/qr-generator/{slug}")
    def generator(slug: str):
        return {"slug": slug}

    @app.get("/blog/{slug}")
    def blog(slug: str):
        return {"slug": slug}

    @app.get("/r/{identifier}")
    def resolve(identifier: str):
        return {"id": identifier}

    @app.get("/api/ping")
    def ping():
        return {"ok": True}

    return TestClient(app)


def test_turkish_path_is_rewritten_internally(locale_client):
    response = locale_client.get("/fiyatlandirma")

    assert response.status_code == 200
    assert response.json() == {"path": "/pricing", "locale": "tr"}
    assert response.headers["x-pathname"] == "/fiyatlandirma"
    assert response.headers["x-url-locale"] == "tr"


def test_qr_type_slug_is_translated(locale_client):
    assert locale_client.get("/qr-olusturucu/arac-park").json() == {"slug": "parking"}


def test_english_path_uses_cookie_locale(locale_client):
    locale_client.cookies.set("NEXT_LOCALE", "en")

    response = locale_client.get("/pricing")

    assert response.json()["locale"] == "en"
    assert "x-url-locale" not in response.headers


def test_blog_redirects_to_cookie_locale_slug(locale_client):
    locale_client.cookies.set("NEXT_LOCALE", "en")

    response = locale_client.get("/blog/konum-qr-kod-google-maps", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].endswith("/blog/location-qr-code-google-maps")


def test_blog_default_locale_is_turkish(locale_client):
    response = locale_client.get("/blog/location-qr-code-google-maps", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].endswith("/blog/konum-qr-kod-google-maps")


def test_landing_routes_get_pathname_header(locale_client):
    response = locale_client.get("/r/abc")

    assert response.json() == {"id": "abc"}
    assert response.headers["x-pathname"] == "/r/abc"


def test_api_passes_through_untouched(locale_client):
    response = locale_client.get("/api/ping")

    assert response.json() == {"ok": True}
    assert "x-pathname" not in response.headers
