"""
ALMACENAMIENTO DE USUARIOS, EVENTOS Y REGISTROS

Base de datos simple en un fichero JSON con tres secciones: users, events y registrations.
"""

import json
from pathlib import Path
from typing import Optional

from .models import User, Event, Registration
from ..config import DATA_PATH
from ..logger import get_logger

logger = get_logger("store")

DB_PATH = Path(DATA_PATH) / "registrations.db"

_SECTIONS = ("users", "events", "registrations")


# funcion para cargar la base de datos
def _load_db() -> dict:
    # si el archivo no es un json valido --> se respalda y se devuelve una base vacia
    empty = {name: {} for name in _SECTIONS}
    if not DB_PATH.exists():
        return empty
    try:
        db = json.loads(DB_PATH.read_text(encoding="utf-8"))
    except Exception as e:
        logger.warning(f"STORE: DB corrupta ({e}). Se creará una nueva base.")
        backup = DB_PATH.with_suffix(".corrupt")
        try:
            DB_PATH.rename(backup)
            logger.info(f"STORE: Se ha renombrado el archivo corrupto a {backup.name}")
        except OSError as e2:
            logger.debug(f"STORE: No se pudo respaldar la base corrupta: {e2}")
        return empty
    for name in _SECTIONS:
        db.setdefault(name, {})
    return db


# funcion para guardar la base de datos
def _save_db(db: dict) -> None:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    DB_PATH.write_text(json.dumps(db, indent=2, ensure_ascii=False), encoding="utf-8")


# USUARIOS

def save_user(user: User) -> None:
    db = _load_db()
    db["users"][user.id] = user.to_dict()
    _save_db(db)


def get_user(user_id: str) -> Optional[User]:
    data = _load_db()["users"].get(user_id)
    return User.from_dict(data) if data else None


def find_user_by_external_id(external_id: str) -> Optional[User]:
    for data in _load_db()["users"].values():
        if data.get("external_id") == external_id:
            return User.from_dict(data)
    return None


def delete_user(user_id: str) -> bool:
    db = _load_db()
    if user_id not in db["users"]:
        return False
    del db["users"][user_id]
    _save_db(db)
    return True


# EVENTOS

def save_event(event: Event) -> None:
    db = _load_db()
    db["events"][event.id] = event.to_dict()
    _save_db(db)


def get_event(event_id: str) -> Optional[Event]:
    data = _load_db()["events"].get(event_id)
    return Event.from_dict(data) if data else None


# REGISTROS

def save_registration(registration: Registration) -> None:
    db = _load_db()
    db["registrations"][registration.id] = registration.to_dict()
    _save_db(db)


def get_registration(registration_id: str) -> Optional[Registration]:
    data = _load_db()["registrations"].get(registration_id)
    return Registration.from_dict(data) if data else None


def find_registration(user_id: str, event_id: str) -> Optional[Registration]:
    for data in _load_db()["registrations"].values():
        if data["user_id"] == user_id and data["event_id"] == event_id:
            return Registration.from_dict(data)
    return None


def list_event_registrations(event_id: str) -> list[Registration]:
    return [
        Registration.from_dict(data)
        for data in _load_db()["registrations"].values()
        if data["event_id"] == event_id
    ]
