# valida el alta de usuarios del proveedor de identidad y la gestion de roles
import importlib
import pytest


# helper para recargar modulos con configuracion de prueba
def _load_modules_for_test(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_PATH", str(tmp_path))
    importlib.reload(importlib.import_module("eventpass.config"))
    store = importlib.reload(importlib.import_module("eventpass.events.store"))
    user_service = importlib.reload(importlib.import_module("eventpass.events.user_service"))
    return user_service, store


def _profile(external_id="ext_1", email="alice@example.com", **extra):
    profile = {"id": external_id, "email_addresses": [{"email_address": email}] if email else []}
    profile.update(extra)
    return profile


# primer inicio de sesion crea el usuario como ATTENDEE, el segundo lo reutiliza
def test_get_or_create_user_creates_once(tmp_path, monkeypatch):
    user_service, store = _load_modules_for_test(tmp_path, monkeypatch)
    u1 = user_service.get_or_create_user(_profile(first_name="Alice", last_name="Liddell"))
    assert u1.role == "ATTENDEE"
    assert u1.email == "alice@example.com"
    assert u1.first_name == "Alice"
    u2 = user_service.get_or_create_user(_profile())
    assert u2.id == u1.id
    assert len(store._load_db()["users"]) == 1


def test_get_or_create_user_without_profile_returns_none(tmp_path, monkeypatch):
    user_service, _ = _load_modules_for_test(tmp_path, monkeypatch)
    assert user_service.get_or_create_user(None) is None


def test_get_or_create_user_without_email_raises(tmp_path, monkeypatch):
    user_service, _ = _load_modules_for_test(tmp_path, monkeypatch)
    with pytest.raises(ValueError):
        user_service.get_or_create_user(_profile(email=None))


# la sincronizacion de perfil actualiza datos pero mantiene el rol
def test_sync_user_profile_keeps_role(tmp_path, monkeypatch):
    user_service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = user_service.get_or_create_user(_profile())
    user.role = "ORGANIZER"
    store.save_user(user)
    synced = user_service.sync_user_profile(_profile(email="new@example.com", first_name="Al"))
    assert synced.id == user.id
    assert synced.email == "new@example.com"
    assert synced.first_name == "Al"
    assert store.get_user(user.id).role == "ORGANIZER"


def test_delete_user_by_external_id(tmp_path, monkeypatch):
    user_service, store = _load_modules_for_test(tmp_path, monkeypatch)
    user = user_service.get_or_create_user(_profile())
    assert user_service.delete_user_by_external_id("ext_1") is True
    assert store.get_user(user.id) is None
    assert user_service.delete_user_by_external_id("ext_1") is False


# solo un administrador puede cambiar roles
def test_update_user_role(tmp_path, monkeypatch):
    user_service, store = _load_modules_for_test(tmp_path, monkeypatch)
    admin = user_service.get_or_create_user(_profile("ext_admin", "admin@example.com"))
    admin.role = "ADMIN"
    store.save_user(admin)
    bob = user_service.get_or_create_user(_profile("ext_bob", "bob@example.com"))

    updated = user_service.update_user_role(admin, bob.id, "ORGANIZER")
    assert updated.role == "ORGANIZER"
    assert store.get_user(bob.id).role == "ORGANIZER"

    with pytest.raises(PermissionError):
        user_service.update_user_role(updated, admin.id, "ATTENDEE")
    with pytest.raises(ValueError):
        user_service.update_user_role(admin, bob.id, "SUPERUSER")
    with pytest.raises(KeyError):
        user_service.update_user_role(admin, "missing", "ADMIN")


# una base corrupta se respalda y se empieza de cero
def test_corrupt_db_is_backed_up(tmp_path, monkeypatch):
    user_service, store = _load_modules_for_test(tmp_path, monkeypatch)
    store.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    store.DB_PATH.write_text("{ not: valid json", encoding="utf-8")
    assert store.get_user("x") is None
    assert store.DB_PATH.with_suffix(".corrupt").exists()
    user_service.get_or_create_user(_profile())
    assert len(store._load_db()["users"]) == 1
