# funciones de alto nivel para usuarios que vienen del proveedor de identidad
import uuid
from typing import Optional

from . import store
from .models import User
from ..logger import get_logger
from ..common.constants import ROLE_ADMIN, ROLE_ATTENDEE, USER_ROLES
from ..common.validators import ensure_one_of

logger = get_logger("users")


# devuelve el primer email del perfil externo o None
def _primary_email(profile: dict) -> Optional[str]:
    emails = profile.get("email_addresses") or []
    for entry in emails:
        address = entry.get("email_address") if isinstance(entry, dict) else entry
        if address:
            return address
    return None


# busca el usuario por su id externo y lo crea en el primer inicio de sesion
def get_or_create_user(profile: Optional[dict]) -> Optional[User]:
    if not profile:
        return None
    user = store.find_user_by_external_id(profile["id"])
    if user is not None:
        return user

    email = _primary_email(profile)
    if not email:
        raise ValueError("No se encontró email para el usuario")

    user = User(
        id=str(uuid.uuid4()),
        external_id=profile["id"],
        email=email,
        first_name=profile.get("first_name") or None,
        last_name=profile.get("last_name") or None,
        image_url=profile.get("image_url") or None,
        role=ROLE_ATTENDEE,
    )
    store.save_user(user)
    logger.info(f"USERS: usuario creado {user.id} para external_id={user.external_id}")
    return user


# sincroniza los datos de perfil (evento user.updated del proveedor); el rol no se toca
def sync_user_profile(profile: dict) -> User:
    user = get_or_create_user(profile)
    email = _primary_email(profile)
    if email:
        user.email = email
    user.first_name = profile.get("first_name") or None
    user.last_name = profile.get("last_name") or None
    user.image_url = profile.get("image_url") or None
    store.save_user(user)
    return user


# borra el usuario local (evento user.deleted del proveedor)
def delete_user_by_external_id(external_id: str) -> bool:
    user = store.find_user_by_external_id(external_id)
    if user is None:
        logger.debug(f"USERS: borrado ignorado, external_id={external_id} no existe")
        return False
    return store.delete_user(user.id)


# cambia el rol de un usuario; solo lo puede hacer un administrador
def update_user_role(actor: User, user_id: str, role: str) -> User:
    if actor is None or actor.role != ROLE_ADMIN:
        raise PermissionError("Se requiere rol de administrador")
    ensure_one_of(role, USER_ROLES, "role")
    user = store.get_user(user_id)
    if user is None:
        raise KeyError(f"Usuario no encontrado: {user_id}")
    user.role = role
    store.save_user(user)
    logger.info(f"USERS: rol de {user_id} cambiado a {role} por {actor.id}")
    return user
