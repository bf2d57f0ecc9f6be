"""
CHECK-IN DE ASISTENTES

Marca registros como presentes a partir del QR firmado o del id del registro.
Solo el organizador del evento o un administrador pueden hacer check-in; cada
accion queda en metadata["checkInHistory"] del registro.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from ..events import store
from ..events.models import User, Event, Registration
from ..events.event_utils import total_tickets_sold
from ..logger import get_logger
from ..tickets.codec import TicketCodec, codec_from_config
from ..common.constants import (
    ROLE_ADMIN,
    ROLE_ATTENDEE,
    ACTION_CHECK_IN,
    ACTION_CHECK_IN_UNDO,
    ACTION_BULK_CHECK_IN,
    ACTION_CURRENT_CHECK_IN,
)

logger = get_logger("checkin")

RECENT_CHECK_INS_LIMIT = 10


@dataclass
class CheckInResult:
    success: bool
    registration: Registration
    message: str
    already_checked_in: bool = False
    history: list = field(default_factory=list)


@dataclass
class BulkCheckInResult:
    summary: dict
    results: list
    message: str

    @property
    def success(self) -> bool:
        return self.summary["successful"] > 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# redondeo de porcentajes como Math.round (0.5 hacia arriba)
def _percent(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(part * 100 / total + 0.5)


def _ensure_staff(staff: Optional[User], event: Event) -> None:
    if staff is None:
        raise PermissionError("Usuario no autenticado")
    if event.organizer_id != staff.id and staff.role != ROLE_ADMIN:
        raise PermissionError("No tienes permiso para gestionar el check-in de este evento")


def _get_event(event_id: str) -> Event:
    event = store.get_event(event_id)
    if event is None:
        raise KeyError(f"Evento no encontrado: {event_id}")
    return event


def _get_registration(registration_id: str) -> Registration:
    registration = store.get_registration(registration_id)
    if registration is None:
        raise KeyError(f"Registro no encontrado: {registration_id}")
    return registration


def _history_entry(action: str, staff: User, now: datetime, **extra) -> dict:
    entry = {
        "action": action,
        "timestamp": now.isoformat(),
        "userId": staff.id,
        "userName": staff.full_name,
    }
    entry.update(extra)
    return entry


# marca el registro como presente y guarda la entrada del historial
def _mark_checked_in(registration: Registration, staff: User, action: str, notes: Optional[str]) -> Registration:
    now = _utcnow()
    metadata = dict(registration.metadata or {})
    metadata["checkInNotes"] = notes or metadata.get("checkInNotes")
    metadata["checkInHistory"] = list(metadata.get("checkInHistory") or []) + [
        _history_entry(action, staff, now, notes=notes)
    ]
    registration.checked_in = True
    registration.checked_in_at = now.isoformat()
    registration.checked_in_by = staff.id
    registration.metadata = metadata
    store.save_registration(registration)
    logger.info(f"CHECKIN: {action} registration={registration.id} por {staff.id}")
    return registration


# historial de check-in; si esta presente se antepone la entrada actual
def get_check_in_history(registration: Registration) -> list:
    history = list((registration.metadata or {}).get("checkInHistory") or [])
    if registration.checked_in and registration.checked_in_at:
        return [{
            "action": ACTION_CURRENT_CHECK_IN,
            "timestamp": registration.checked_in_at,
            "userId": registration.checked_in_by or "",
        }] + history
    return history


# check-in escaneando el QR: la firma del ticket identifica el registro
def verify_and_check_in(staff: Optional[User], qr_data: str, codec: Optional[TicketCodec] = None) -> CheckInResult:
    if staff is None or staff.role == ROLE_ATTENDEE:
        raise PermissionError("No tienes permiso para hacer check-in de asistentes")
    if not qr_data:
        raise ValueError("Faltan los datos del codigo QR")

    codec = codec or codec_from_config()
    verified = codec.verify(qr_data)
    if verified is None:
        logger.warning(f"CHECKIN: QR no valido presentado por {staff.id}")
        raise ValueError("Codigo QR no valido")

    registration = _get_registration(verified.registration_id)
    _ensure_staff(staff, _get_event(registration.event_id))

    if registration.checked_in:
        return CheckInResult(
            success=True,
            registration=registration,
            message="Ya se habia hecho check-in",
            already_checked_in=True,
            history=get_check_in_history(registration),
        )
    _mark_checked_in(registration, staff, ACTION_CHECK_IN, None)
    return CheckInResult(success=True, registration=registration, message="Check-in correcto")


# obtiene el id del registro desde el texto del QR (URL o ticket firmado)
def _registration_id_from_qr(qr_data: str, codec: TicketCodec) -> str:
    if qr_data.startswith("http"):
        path = urlparse(qr_data).path
        registration_id = path.rstrip("/").split("/")[-1]
        if registration_id:
            return registration_id
        raise ValueError("Formato de codigo QR no valido")
    verified = codec.verify(qr_data)
    if verified is None:
        raise ValueError("Formato de codigo QR no valido")
    return verified.registration_id


# check-in desde la pagina del evento, por id de registro o por QR
def check_in(
    staff: Optional[User],
    event_id: str,
    registration_id: Optional[str] = None,
    qr_data: Optional[str] = None,
    notes: Optional[str] = None,
    force: bool = False,
    codec: Optional[TicketCodec] = None,
) -> CheckInResult:
    if staff is None:
        raise PermissionError("Usuario no autenticado")
    if not registration_id and qr_data:
        registration_id = _registration_id_from_qr(qr_data, codec or codec_from_config())
    if not registration_id:
        raise ValueError("Se necesita el id del registro")

    registration = _get_registration(registration_id)
    if registration.event_id != event_id:
        raise ValueError("El registro no es de este evento")
    _ensure_staff(staff, _get_event(event_id))

    if registration.checked_in and not force:
        return CheckInResult(
            success=True,
            registration=registration,
            message=f"Ya se hizo check-in a las {registration.checked_in_at}",
            already_checked_in=True,
            history=get_check_in_history(registration),
        )
    _mark_checked_in(registration, staff, ACTION_CHECK_IN, notes)
    return CheckInResult(success=True, registration=registration, message="Check-in correcto")


# deshace un check-in, dejando constancia del motivo
def undo_check_in(staff: Optional[User], event_id: str, registration_id: str, reason: Optional[str] = None) -> CheckInResult:
    if not registration_id:
        raise ValueError("Se necesita el id del registro")
    registration = _get_registration(registration_id)
    _ensure_staff(staff, _get_event(registration.event_id))
    if registration.event_id != event_id:
        raise ValueError("El registro no es de este evento")
    if not registration.checked_in:
        raise ValueError("El registro no tiene check-in")

    now = _utcnow()
    metadata = dict(registration.metadata or {})
    metadata["undoReason"] = reason
    metadata["checkInHistory"] = list(metadata.get("checkInHistory") or []) + [
        _history_entry(ACTION_CHECK_IN_UNDO, staff, now, reason=reason)
    ]
    registration.checked_in = False
    registration.checked_in_at = None
    registration.checked_in_by = None
    registration.metadata = metadata
    store.save_registration(registration)
    logger.info(f"CHECKIN: {ACTION_CHECK_IN_UNDO} registration={registration.id} por {staff.id}")
    return CheckInResult(success=True, registration=registration, message="Check-in deshecho")


# check-in de varios registros a la vez; los fallos no detienen el resto
def bulk_check_in(staff: Optional[User], event_id: str, registration_ids: list, notes: Optional[str] = None) -> BulkCheckInResult:
    _ensure_staff(staff, _get_event(event_id))
    if not isinstance(registration_ids, list) or not registration_ids:
        raise ValueError("Se necesita la lista de ids de registro")

    results = []
    for reg_id in registration_ids:
        registration = store.get_registration(reg_id)
        if registration is None or registration.event_id != event_id:
            results.append({"id": reg_id, "success": False, "error": "Registro no encontrado o no es de este evento"})
            continue
        if registration.checked_in:
            results.append({
                "id": reg_id,
                "success": False,
                "error": "Ya tiene check-in",
                "alreadyCheckedIn": True,
                "userId": registration.user_id,
            })
            continue
        try:
            _mark_checked_in(registration, staff, ACTION_BULK_CHECK_IN, notes)
        except OSError as e:
            logger.error(f"CHECKIN: fallo al guardar registration={reg_id}: {e}")
            results.append({"id": reg_id, "success": False, "error": "No se pudo guardar el check-in"})
            continue
        results.append({"id": reg_id, "success": True, "userId": registration.user_id})

    successful = sum(1 for r in results if r["success"])
    already = sum(1 for r in results if r.get("alreadyCheckedIn"))
    summary = {
        "total": len(registration_ids),
        "successful": successful,
        "failed": len(results) - successful,
        "alreadyCheckedIn": already,
    }
    return BulkCheckInResult(
        summary=summary,
        results=results,
        message=f"Check-in de {successful} de {len(registration_ids)} asistentes",
    )


def _hour_bucket(iso_timestamp: str) -> str:
    dt = datetime.fromisoformat(iso_timestamp)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:00:00")


# estadisticas de check-in del evento
def get_check_in_stats(staff: Optional[User], event_id: str) -> dict:
    event = _get_event(event_id)
    _ensure_staff(staff, event)

    registrations = store.list_event_registrations(event_id)
    checked = [r for r in registrations if r.checked_in]
    checked.sort(key=lambda r: r.checked_in_at or "", reverse=True)

    total_tickets = total_tickets_sold(registrations)
    checked_tickets = total_tickets_sold(checked)

    timeline: dict[str, int] = {}
    for reg in checked:
        if reg.checked_in_at:
            hour = _hour_bucket(reg.checked_in_at)
            timeline[hour] = timeline.get(hour, 0) + 1

    return {
        "event": {
            "id": event.id,
            "title": event.title,
            "capacity": event.capacity,
            "startDate": event.start_date,
            "endDate": event.end_date,
        },
        "statistics": {
            "totalRegistrations": len(registrations),
            "totalTickets": total_tickets,
            "checkedInCount": len(checked),
            "checkedInTickets": checked_tickets,
            "notCheckedInCount": len(registrations) - len(checked),
            "notCheckedInTickets": total_tickets - checked_tickets,
            "checkInRate": _percent(len(checked), len(registrations)),
            "ticketCheckInRate": _percent(checked_tickets, total_tickets),
        },
        "timeline": [{"time": t, "count": c} for t, c in sorted(timeline.items())],
        "recentCheckIns": [
            {
                "id": reg.id,
                "userId": reg.user_id,
                "checkedInAt": reg.checked_in_at,
                "checkedInBy": reg.checked_in_by,
                "quantity": reg.quantity,
                "notes": (reg.metadata or {}).get("checkInNotes"),
            }
            for reg in checked[:RECENT_CHECK_INS_LIMIT]
        ],
    }
