"""
CODIFICACION Y VERIFICACION DE LOS TICKETS QR

Un ticket es un JSON autocontenido con la identidad del registro, el instante de
emision y un hash SHA-256 calculado sobre el JSON de los datos concatenado con un
secreto del servidor. No se guarda nada en el servidor: la validez depende solo
de los bytes presentados y del secreto.
"""

import json
import time
from typing import Callable, Optional

from .models import TicketIdentity, VerifiedTicket
from ..config import load_qr_secret, DEFAULT_QR_SECRET_KEY, QR_SECRET_MIN_LENGTH
from ..logger import get_logger
from ..crypto.digest import compute_keyed_digest_hex, digests_match
from ..common.constants import (
    TOKEN_PAYLOAD_FIELDS,
    TOKEN_HASH_FIELD,
    TOKEN_STRING_FIELDS,
    TOKEN_INT_FIELDS,
)
from ..common.validators import ensure_non_empty_str, is_json_int

logger = get_logger("codec")


# reloj por defecto: milisegundos desde epoch (reloj de pared, no monotono)
def current_millis() -> int:
    return time.time_ns() // 1_000_000


# serializa los campos de datos en el orden fijo, sin espacios (igual que JSON.stringify)
def canonical_payload(values: dict) -> str:
    ordered = {name: values[name] for name in TOKEN_PAYLOAD_FIELDS}
    return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False)


class TicketCodec:
    """Emite y verifica tickets firmados con un secreto fijo."""

    def __init__(self, secret: str, clock: Optional[Callable[[], int]] = None):
        ensure_non_empty_str(secret, "secret")
        self._secret = secret.encode("utf-8")
        self._clock = clock or current_millis

    def _digest(self, values: dict) -> str:
        return compute_keyed_digest_hex(self._secret, canonical_payload(values).encode("utf-8"))

    def issue(self, identity: TicketIdentity) -> str:
        values = identity.to_wire()
        values["timestamp"] = int(self._clock())
        token = {name: values[name] for name in TOKEN_PAYLOAD_FIELDS}
        token[TOKEN_HASH_FIELD] = self._digest(values)
        logger.info(f"CODEC: ticket emitido registration={identity.registration_id} event={identity.event_id}")
        return json.dumps(token, separators=(",", ":"), ensure_ascii=False)

    def verify(self, token_text) -> Optional[VerifiedTicket]:
        data = self._parse(token_text)
        if data is None:
            return None

        expected = self._digest(data).encode("ascii")
        presented = data[TOKEN_HASH_FIELD].encode("utf-8")
        if not digests_match(expected, presented):
            logger.warning(f"CODEC: firma no valida para registration={data['registrationId']}")
            return None

        logger.info(f"CODEC: ticket verificado registration={data['registrationId']}")
        return VerifiedTicket.from_wire(data)

    # devuelve el diccionario si tiene la forma esperada, None en otro caso
    def _parse(self, token_text) -> Optional[dict]:
        if not isinstance(token_text, str) or not token_text.strip():
            logger.debug("CODEC: ticket mal formado (vacio o no es texto)")
            return None
        try:
            data = json.loads(token_text)
        except (ValueError, RecursionError) as e:
            logger.debug(f"CODEC: ticket mal formado (JSON no valido: {e})")
            return None

        if not isinstance(data, dict):
            logger.debug("CODEC: ticket mal formado (no es un objeto)")
            return None
        expected_keys = set(TOKEN_PAYLOAD_FIELDS) | {TOKEN_HASH_FIELD}
        if set(data) != expected_keys:
            logger.debug(f"CODEC: ticket mal formado (campos {sorted(data)})")
            return None
        for name in TOKEN_STRING_FIELDS + (TOKEN_HASH_FIELD,):
            if not isinstance(data[name], str):
                logger.debug(f"CODEC: ticket mal formado ('{name}' no es string)")
                return None
            # JSON admite surrogates sueltos ("\ud800") que no se pueden pasar a UTF-8
            try:
                data[name].encode("utf-8")
            except UnicodeEncodeError:
                logger.debug(f"CODEC: ticket mal formado ('{name}' no es UTF-8 valido)")
                return None
        for name in TOKEN_INT_FIELDS:
            if not is_json_int(data[name]):
                logger.debug(f"CODEC: ticket mal formado ('{name}' no es entero)")
                return None
        return data


# construye un codec con el secreto de la configuracion
def codec_from_config(clock: Optional[Callable[[], int]] = None) -> TicketCodec:
    secret = load_qr_secret()
    if secret == DEFAULT_QR_SECRET_KEY:
        logger.warning("CODEC: QR_SECRET_KEY no definido, se usa el secreto por defecto")
    elif len(secret) < QR_SECRET_MIN_LENGTH:
        logger.warning(f"CODEC: QR_SECRET_KEY tiene menos de {QR_SECRET_MIN_LENGTH} caracteres")
    return TicketCodec(secret, clock=clock)
