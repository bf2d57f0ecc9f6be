# valida el registro en eventos y la emision del ticket QR
import importlib
import re
import pytest

from eventpass.tickets import TicketCodec
from eventpass.events.models import User, Event

SECRET = "test-secret-0123456789"
FUTURE_START = "2099-06-01T18:00:00+00:00"
FUTURE_END = "2099-06-01T23:00:00+00:00"


# helper para recargar modulos con configuracion de prueba
def _load_modules_for_test(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_PATH", str(tmp_path))
    monkeypatch.setenv("QR_SECRET_KEY", SECRET)
    importlib.reload(importlib.import_module("eventpass.config"))
    store = importlib.reload(importlib.import_module("eventpass.events.store"))
    service = importlib.reload(importlib.import_module("eventpass.events.registration_service"))
    return service, store


def _setup(store, capacity=10, price=0.0, status="PUBLISHED", end_date=FUTURE_END):
    user = User(id="u1", external_id="ext_u1", email="u1@example.com", first_name="Ana", last_name="Gil")
    store.save_user(user)
    store.save_event(Event(id="e1", title="Concierto", organizer_id="o1", capacity=capacity,
                           start_date=FUTURE_START, end_date=end_date, price=price, status=status))
    return user


def _other_user(store, n):
    user = User(id=f"u{n}", external_id=f"ext_u{n}", email=f"u{n}@example.com")
    store.save_user(user)
    return user


# registro correcto: se guarda el registro con el ticket firmado
def test_register_issues_signed_ticket(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store)
    codec = TicketCodec(SECRET)

    reg = service.register_for_event(user, "e1", quantity=2, details={"phone": "600111222", "ignored": "x"}, codec=codec)
    assert reg.status == "CONFIRMED"
    assert reg.quantity == 2
    assert reg.payment_status == "COMPLETED"
    assert re.fullmatch(r"TKT-[0-9A-F]{8}", reg.ticket_number)
    assert reg.metadata["phone"] == "600111222"
    assert "ignored" not in reg.metadata
    assert "registeredAt" in reg.metadata

    verified = codec.verify(reg.qr_code)
    assert verified is not None
    assert (verified.registration_id, verified.event_id, verified.user_id) == (reg.id, "e1", "u1")
    assert verified.ticket_number == reg.ticket_number
    assert verified.quantity == 2

    stored = store.get_registration(reg.id)
    assert stored == reg


# sin codec explicito se usa el secreto de la configuracion
def test_register_uses_configured_secret(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store)
    reg = service.register_for_event(user, "e1")
    assert TicketCodec(SECRET).verify(reg.qr_code) is not None
    assert TicketCodec("other-secret").verify(reg.qr_code) is None


def test_register_paid_event_is_pending(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store, price=25.0)
    reg = service.register_for_event(user, "e1", quantity=3, codec=TicketCodec(SECRET))
    assert reg.total_amount == 75.0
    assert reg.payment_status == "PENDING"


def test_register_unknown_event_raises(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store)
    with pytest.raises(KeyError):
        service.register_for_event(user, "missing", codec=TicketCodec(SECRET))


@pytest.mark.parametrize("status", ["DRAFT", "CANCELLED", "COMPLETED"])
def test_register_requires_published_event(tmp_path, monkeypatch, status):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store, status=status)
    with pytest.raises(ValueError):
        service.register_for_event(user, "e1", codec=TicketCodec(SECRET))


# el aforo se calcula con la suma de cantidades
def test_register_respects_capacity(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    codec = TicketCodec(SECRET)
    user = _setup(store, capacity=3)
    service.register_for_event(user, "e1", quantity=2, codec=codec)

    with pytest.raises(ValueError, match="1"):
        service.register_for_event(_other_user(store, 2), "e1", quantity=2, codec=codec)
    service.register_for_event(_other_user(store, 3), "e1", quantity=1, codec=codec)
    with pytest.raises(ValueError):
        service.register_for_event(_other_user(store, 4), "e1", codec=codec)


def test_register_ended_event_raises(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store, end_date="2000-01-01T00:00:00")
    with pytest.raises(ValueError):
        service.register_for_event(user, "e1", codec=TicketCodec(SECRET))


def test_register_twice_raises(tmp_path, monkeypatch):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store)
    service.register_for_event(user, "e1", codec=TicketCodec(SECRET))
    with pytest.raises(ValueError):
        service.register_for_event(user, "e1", codec=TicketCodec(SECRET))


@pytest.mark.parametrize("quantity", [0, -2, True])
def test_register_invalid_quantity_raises(tmp_path, monkeypatch, quantity):
    service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = _setup(store)
    with pytest.raises(ValueError):
        service.register_for_event(user, "e1", quantity=quantity, codec=TicketCodec(SECRET))
