"""tickets QR

Este paquete expone la API de tickets: emision y verificacion del JSON firmado
(`codec`) y la imagen QR que lo transporta (`qr_image`).
"""
from .models import TicketIdentity, VerifiedTicket
from .codec import TicketCodec, codec_from_config, canonical_payload
