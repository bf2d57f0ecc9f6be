"""Registro de asistentes en eventos y emision del ticket QR."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from . import store
from .event_utils import total_tickets_sold
from .models import User, Registration
from ..config import TICKET_NUMBER_PREFIX
from ..logger import get_logger
from ..tickets.codec import TicketCodec, codec_from_config
from ..tickets.models import TicketIdentity
from ..common.constants import (
    EVENT_PUBLISHED,
    REGISTRATION_CONFIRMED,
    PAYMENT_PENDING,
    PAYMENT_COMPLETED,
)
from ..common.validators import ensure_int_at_least

logger = get_logger("register")

# campos del formulario de registro que se guardan en metadata
REGISTRATION_DETAIL_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phone",
    "organization",
    "dietaryRequirements",
    "specialRequirements",
    "marketingEmails",
    "termsAccepted",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# fechas ISO 8601; sin zona se asume UTC
def _parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def generate_ticket_number() -> str:
    return f"{TICKET_NUMBER_PREFIX}-{uuid.uuid4().hex[:8].upper()}"


# registra al usuario en el evento y le emite el ticket firmado
def register_for_event(
    user: User,
    event_id: str,
    quantity: int = 1,
    details: Optional[dict] = None,
    codec: Optional[TicketCodec] = None,
) -> Registration:
    ensure_int_at_least(quantity, 1, "quantity")
    event = store.get_event(event_id)
    if event is None:
        raise KeyError(f"Evento no encontrado: {event_id}")
    if event.status != EVENT_PUBLISHED:
        raise ValueError("Este evento no admite registros")

    # comprobar aforo con la suma de cantidades ya vendidas
    remaining = event.capacity - total_tickets_sold(store.list_event_registrations(event_id))
    if remaining < quantity:
        if remaining <= 0:
            raise ValueError("El evento está completo")
        raise ValueError(f"Solo quedan {remaining} entrada(s)")

    now = _utcnow()
    if _parse_iso(event.end_date) < now:
        raise ValueError("Este evento ya ha terminado")

    if store.find_registration(user.id, event_id) is not None:
        raise ValueError("Ya estás registrado en este evento")

    metadata = {name: (details or {}).get(name) for name in REGISTRATION_DETAIL_FIELDS}
    metadata["registeredAt"] = now.isoformat()

    registration = Registration(
        id=str(uuid.uuid4()),
        event_id=event_id,
        user_id=user.id,
        quantity=quantity,
        status=REGISTRATION_CONFIRMED,
        total_amount=event.price * quantity,
        payment_status=PAYMENT_PENDING if event.price > 0 else PAYMENT_COMPLETED,
        ticket_number=generate_ticket_number(),
        created_at=now.isoformat(),
        metadata=metadata,
    )

    codec = codec or codec_from_config()
    registration.qr_code = codec.issue(TicketIdentity(
        registration_id=registration.id,
        event_id=event_id,
        user_id=user.id,
        ticket_number=registration.ticket_number,
        quantity=quantity,
    ))
    store.save_registration(registration)
    logger.info(f"REGISTER: {user.id} registrado en {event_id} ({quantity} entradas)")
    return registration
