"""Tracking links and their scannable QR images."""

import base64
import io

import qrcode

from ..config import settings


def tracking_url(tracking_code: str) -> str:
    return f"{settings.app_origin.rstrip('/')}/track/{tracking_code}"


def qr_data_uri(data: str, box_size: int = 6) -> str:
    """Render ``data`` as a PNG QR code and return it as a data: URI."""
    qr = qrcode.QRCode(version=None, box_size=box_size, border=2)
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode()}"
