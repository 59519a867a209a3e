import math
from typing import Any

from pydantic_core import to_json

PRIMITIVE_TYPES = (str, bytes, bytearray, int, float, bool)


def is_falsy(value: Any) -> bool:
    """Falsedad al estilo JavaScript: los contenedores vacíos NO son falsos."""
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, bytearray)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def is_primitive(value: Any) -> bool:
    return isinstance(value, PRIMITIVE_TYPES)


def to_json_text(value: Any) -> str:
    """Serializa a JSON compacto (modelos pydantic, dataclasses y fechas incluidos)."""
    return to_json(value).decode("utf-8")


def to_text(value: Any) -> str:
    """Forma textual canónica de un valor primitivo."""
    match value:
        case bool():
            return "true" if value else "false"
        case bytes() | bytearray():
            return bytes(value).decode("utf-8")
        case float() if value.is_integer():
            return str(int(value))
        case None:
            return "null"
        case _:
            return str(value)
