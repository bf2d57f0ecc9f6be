from dataclasses import dataclass, asdict, field
from typing import Optional

from ..common.constants import (
    ROLE_ATTENDEE,
    USER_ROLES,
    EVENT_DRAFT,
    EVENT_STATUSES,
    REGISTRATION_CONFIRMED,
    PAYMENT_PENDING,
)
from ..common.validators import ensure_non_empty_str, ensure_int_at_least, ensure_one_of


@dataclass
class User:
    id: str
    external_id: str  # id del proveedor de identidad
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    role: str = ROLE_ATTENDEE

    def __post_init__(self):
        for name in ("id", "external_id", "email"):
            ensure_non_empty_str(getattr(self, name), name)
        ensure_one_of(self.role, USER_ROLES, "role")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "User":
        return User(**data)


@dataclass
class Event:
    id: str
    title: str
    organizer_id: str
    capacity: int
    start_date: str  # ISO 8601 con zona, "2025-11-21T20:00:00+00:00"
    end_date: str
    price: float = 0.0
    status: str = EVENT_DRAFT

    def __post_init__(self):
        for name in ("id", "title", "organizer_id", "start_date", "end_date"):
            ensure_non_empty_str(getattr(self, name), name)
        ensure_int_at_least(self.capacity, 0, "capacity")
        if self.price < 0:
            raise ValueError("El campo 'price' no puede ser negativo.")
        ensure_one_of(self.status, EVENT_STATUSES, "status")

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "Event":
        return Event(**data)


@dataclass
class Registration:
    id: str
    event_id: str
    user_id: str
    quantity: int = 1
    status: str = REGISTRATION_CONFIRMED
    total_amount: float = 0.0
    payment_status: str = PAYMENT_PENDING
    ticket_number: Optional[str] = None
    qr_code: Optional[str] = None
    checked_in: bool = False
    checked_in_at: Optional[str] = None
    checked_in_by: Optional[str] = None
    created_at: Optional[str] = None
    # datos del formulario, notas de check-in e historial (checkInHistory)
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "Registration":
        return Registration(**data)
