# funciones para generar la imagen QR (PNG) a partir del texto del ticket
import base64
import io

import qrcode
from qrcode.image.pil import PilImage
from PIL import Image

from ..config import QR_IMAGE_WIDTH, QR_IMAGE_MARGIN, QR_DARK_COLOR, QR_LIGHT_COLOR
from ..logger import get_logger

logger = get_logger("qr")


# genera el PNG del QR, cuadrado de width pixeles
def render_qr_png(data: str, width: int = QR_IMAGE_WIDTH, margin: int = QR_IMAGE_MARGIN) -> bytes:
    if not data:
        raise ValueError("No hay datos para el codigo QR")
    try:
        qr = qrcode.QRCode(border=margin, box_size=10, image_factory=PilImage)
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color=QR_DARK_COLOR, back_color=QR_LIGHT_COLOR).get_image()
        # NEAREST para no difuminar los modulos al escalar
        img = img.convert("RGB").resize((width, width), Image.NEAREST)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except Exception as e:
        logger.error(f"QR: error al generar la imagen: {e}")
        raise RuntimeError("No se pudo generar el codigo QR") from e
    logger.debug(f"QR: imagen generada width={width} margin={margin} data_len={len(data)}")
    return buf.getvalue()


# genera el QR como data URL (para incrustarlo en HTML o en el email)
def render_qr_data_url(data: str, width: int = QR_IMAGE_WIDTH, margin: int = QR_IMAGE_MARGIN) -> str:
    png = render_qr_png(data, width=width, margin=margin)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
