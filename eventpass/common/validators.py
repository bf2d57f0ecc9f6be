# funciones de validacion para los datos de entrada


# funcion para verificar que un valor es un string no vacio
def ensure_non_empty_str(value, name: str) -> str:
    if not isinstance(value, str) or value.strip() == "":
        raise ValueError(f"El campo '{name}' es obligatorio y no puede estar vacío.")
    return value


# funcion para verificar que un valor es un entero (no bool) mayor o igual que minimum
def ensure_int_at_least(value, minimum: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"El campo '{name}' debe ser un entero.")
    if value < minimum:
        raise ValueError(f"El campo '{name}' debe ser >= {minimum}.")
    return value


# funcion para comprobar que un valor es uno de los permitidos
def ensure_one_of(value, allowed, name: str):
    if value not in allowed:
        raise ValueError(f"{name}: valor no válido '{value}'. Permitidos: {', '.join(allowed)}")
    return value


# funcion para comprobar si un valor es un entero JSON valido (los bool no cuentan)
def is_json_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
