# funciones de calculo de aforo de un evento a partir de sus registros
from .models import Event, Registration


# suma las cantidades de todos los registros (un registro sin cantidad cuenta como 1)
def total_tickets_sold(registrations: list[Registration]) -> int:
    return sum(reg.quantity or 1 for reg in registrations)


def available_spots(event: Event, registrations: list[Registration]) -> int:
    return max(0, event.capacity - total_tickets_sold(registrations))


def fill_percentage(event: Event, registrations: list[Registration]) -> float:
    if event.capacity == 0:
        return 100.0
    return total_tickets_sold(registrations) / event.capacity * 100


def is_event_full(event: Event, registrations: list[Registration]) -> bool:
    return available_spots(event, registrations) <= 0
