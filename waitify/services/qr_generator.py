import io
import base64

import qrcode


def generate_qr_code_png(data: str, box_size: int = 10) -> bytes:
    """Render a join link as PNG bytes (printable table/counter cards)."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_code_base64(data: str) -> str:
    """Generate QR code as base64 data URL."""
    png = generate_qr_code_png(data)
    return f"data:image/png;base64,{base64.b64encode(png).decode()}"
