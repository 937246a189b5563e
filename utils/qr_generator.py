# =============================================================================
# 🧠 QR-Code Generator – QR Code Shine
# -----------------------------------------------------------------------------
# Rendert QR-Bilder serverseitig (PNG als data-URL oder SVG) mit Farben,
# Größe und Fehlerkorrektur-Stufe. Gespeichert wird nichts.
# =============================================================================

from __future__ import annotations

import base64
import logging
from io import BytesIO
from typing import Dict, List

import qrcode
import qrcode.image.styledpil
import qrcode.image.styles.colormasks as mask
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError
from PIL import Image, ImageColor

logger = logging.getLogger(__name__)

ERROR_CORRECTION: Dict[str, int] = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

# Ruhezone in Modulen
QR_MARGIN = 2


def _build_matrix(content: str, error_correction: str) -> qrcode.QRCode:
    level = ERROR_CORRECTION.get(error_correction.upper())
    if level is None:
        raise ValueError(f"Unbekannte Fehlerkorrektur: {error_correction}")
    qr = qrcode.QRCode(version=None, error_correction=level, box_size=10, border=QR_MARGIN)
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise ValueError("Inhalt ist zu lang für einen QR-Code") from exc
    return qr


def parse_color(value: str) -> tuple:
    """'#0D2A78' → (13, 42, 120); ungültige Farben werfen ValueError."""
    return ImageColor.getrgb(value)


def generate_qr_png(
    content: str,
    size: int = 256,
    foreground: str = "#000000",
    background: str = "#ffffff",
    error_correction: str = "M",
) -> bytes:
    """Erzeugt den QR-Code als PNG (size × size Pixel)."""
    qr = _build_matrix(content, error_correction)
    color_mask = mask.SolidFillColorMask(
        front_color=parse_color(foreground),
        back_color=parse_color(background),
    )

    img = qr.make_image(
        image_factory=qrcode.image.styledpil.StyledPilImage,
        color_mask=color_mask,
    ).convert("RGB")
    img = img.resize((size, size), Image.Resampling.NEAREST)

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    logger.debug("QR-PNG erzeugt (%d Bytes, %dpx)", buffer.getbuffer().nbytes, size)
    return buffer.getvalue()


def generate_qr_data_url(content: str, **options) -> str:
    png = generate_qr_png(content, **options)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def generate_qr_svg(
    content: str,
    size: int = 256,
    foreground: str = "#000000",
    background: str = "#ffffff",
    error_correction: str = "M",
) -> str:
    """SVG mit einem Pfad für alle dunklen Module, viewBox in Modulen."""
    # Farben vorab prüfen, damit SVG und PNG gleich validieren
    parse_color(foreground)
    parse_color(background)

    matrix = _build_matrix(content, error_correction).get_matrix()
    modules = len(matrix)

    segments: List[str] = []
    for y, row in enumerate(matrix):
        for x, dark in enumerate(row):
            if dark:
                segments.append(f"M{x} {y}h1v1h-1z")

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {modules} {modules}" shape-rendering="crispEdges">'
        f'<rect width="100%" height="100%" fill="{background}"/>'
        f'<path fill="{foreground}" d="{"".join(segments)}"/>'
        "</svg>"
    )
