from fastapi.routing import APIRoute

from main import app

# ✅ erlaubte Statuscodes ohne Login
ALLOWED = {200, 401, 403}

EXPECTED_ROUTES = {
    ("GET", "/"),
    ("GET", "/r/{identifier}"),
    ("GET", "/v/{identifier}"),
    ("GET", "/app/{identifier}"),
    ("GET", "/html/{identifier}"),
    ("GET", "/menu/{identifier}"),
    ("GET", "/api/featured-qr"),
    ("GET", "/api/analytics"),
    ("GET", "/api/qr"),
    ("POST", "/api/qr"),
    ("PUT", "/api/qr/{qr_id}"),
    ("PATCH", "/api/qr/{qr_id}/toggle"),
    ("DELETE", "/api/qr/{qr_id}"),
    ("POST", "/api/qr/generate"),
    ("DELETE", "/api/account"),
    ("PATCH", "/api/admin/qr/{qr_id}/featured"),
    ("DELETE", "/api/admin/qr/{qr_id}"),
    ("DELETE", "/api/admin/users/{user_id}"),
    ("GET", "/api/admin/plan-limits"),
    ("PUT", "/api/admin/plan-limits/{slug}"),
}


def _registered():
    return {
        (method, route.path)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }


def test_expected_routes_are_registered():
    missing = EXPECTED_ROUTES - _registered()
    assert not missing, f"❌ Fehlende Routen: {sorted(missing)}"


def test_all_get_routes(client):
    """Alle GET-Routen ohne Parameter antworten ohne Serverfehler."""
    failed = []

    for route in app.routes:
        if not isinstance(route, APIRoute) or "GET" not in route.methods:
            continue
        # Parameterisierte Routen überspringen
        if "{" in route.path:
            continue

        response = client.get(route.path)
        if response.status_code not in ALLOWED:
            failed.append((route.path, response.status_code))

    assert not failed, f"Fehlerhafte Routen: {failed}"


def test_home_lists_fallback_plans(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "Enterprise" in response.text
    assert "Sınırsız QR kod" in response.text
