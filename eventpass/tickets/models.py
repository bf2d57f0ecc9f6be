from dataclasses import dataclass

from ..common.validators import ensure_non_empty_str, ensure_int_at_least


@dataclass(frozen=True)
class TicketIdentity:
    """Datos de un registro que se firman en el QR del ticket."""

    registration_id: str
    event_id: str
    user_id: str
    ticket_number: str
    quantity: int = 1

    def __post_init__(self):
        # validar que ningun campo obligatorio sea vacio o None
        for field in ("registration_id", "event_id", "user_id", "ticket_number"):
            ensure_non_empty_str(getattr(self, field), field)
        ensure_int_at_least(self.quantity, 1, "quantity")

    # campos en el orden y con los nombres del JSON firmado (sin timestamp)
    def to_wire(self) -> dict:
        return {
            "registrationId": self.registration_id,
            "eventId": self.event_id,
            "userId": self.user_id,
            "ticketNumber": self.ticket_number,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class VerifiedTicket:
    """Resultado de una verificacion correcta: la identidad mas el instante de emision."""

    registration_id: str
    event_id: str
    user_id: str
    ticket_number: str
    quantity: int
    timestamp: int  # epoch ms

    @property
    def identity(self) -> TicketIdentity:
        return TicketIdentity(
            registration_id=self.registration_id,
            event_id=self.event_id,
            user_id=self.user_id,
            ticket_number=self.ticket_number,
            quantity=self.quantity,
        )

    @staticmethod
    def from_wire(data: dict) -> "VerifiedTicket":
        return VerifiedTicket(
            registration_id=data["registrationId"],
            event_id=data["eventId"],
            user_id=data["userId"],
            ticket_number=data["ticketNumber"],
            quantity=data["quantity"],
            timestamp=data["timestamp"],
        )
