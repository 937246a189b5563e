import base64
from io import BytesIO

import pytest
from PIL import Image

from utils.qr_generator import generate_qr_data_url, generate_qr_png, generate_qr_svg

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_png_has_requested_size_and_colors():
    png = generate_qr_png("https://example.com", size=300, foreground="#ff0000", background="#00ff00")

    assert png.startswith(PNG_MAGIC)
    img = Image.open(BytesIO(png)).convert("RGB")
    assert img.size == (300, 300)
    colors = {color for _, color in img.getcolors(maxcolors=10_000)}
    assert (255, 0, 0) in colors
    assert (0, 255, 0) in colors


def test_higher_error_correction_needs_more_modules():
    low = generate_qr_svg("https://example.com/some/longer/path", error_correction="L")
    high = generate_qr_svg("https://example.com/some/longer/path", error_correction="H")

    def modules(svg):
        return int(svg.split('viewBox="0 0 ')[1].split(" ")[0])

    assert modules(high) > modules(low)


def test_svg_uses_colors_and_size():
    svg = generate_qr_svg("Hallo", size=128, foreground="#112233", background="#fafafa")

    assert svg.startswith("<svg")
    assert 'width="128"' in svg
    assert 'fill="#112233"' in svg
    assert 'fill="#fafafa"' in svg


def test_data_url_wraps_png():
    data_url = generate_qr_data_url("Hallo", size=64)

    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    assert base64.b64decode(data_url[len(prefix):]).startswith(PNG_MAGIC)


@pytest.mark.parametrize("render", [generate_qr_png, generate_qr_svg])
def test_invalid_color_is_rejected(render):
    with pytest.raises(ValueError):
        render("Hallo", foreground="nicht-eine-farbe")


def test_content_too_long_is_rejected():
    with pytest.raises(ValueError):
        generate_qr_png("x" * 5000, error_correction="H")


# -------------------------------------------------------------------------
# POST /api/qr/generate
# -------------------------------------------------------------------------
def test_generate_png_endpoint(client):
    response = client.post(
        "/api/qr/generate",
        json={"content": "https://example.com", "type": "url", "size": 200, "errorCorrection": "Q"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "url"
    assert data["content"] == "https://example.com"
    assert data["dataUrl"].startswith("data:image/png;base64,")


def test_generate_svg_endpoint(client):
    response = client.post("/api/qr/generate", json={"content": "Hallo", "format": "svg", "foreground": "#4f46e5"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert 'fill="#4f46e5"' in response.text


def test_generate_requires_content(client):
    response = client.post("/api/qr/generate", json={"type": "url"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Content is required"


def test_generate_rejects_bad_color_and_level(client):
    assert client.post("/api/qr/generate", json={"content": "x", "foreground": "???"}).status_code == 400
    assert client.post("/api/qr/generate", json={"content": "x", "errorCorrection": "Z"}).status_code == 422
