from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

Value = Union[str, List[str]]
StringMap = Dict[str, Value]


class NamedValues:
    """Colección ordenada de valores (o listas de valores) con clave de texto.

    Siempre trabaja sobre una copia del inicializador: modificar uno no afecta
    al otro.
    """

    def __init__(
        self, initializer: Optional[Union["NamedValues", Mapping[str, Value]]] = None
    ):
        if isinstance(initializer, NamedValues):
            initializer = initializer._values
        self._values: StringMap = {
            key: _copy_value(value) for key, value in (initializer or {}).items()
        }

    @property
    def values(self) -> StringMap:
        """Copia plana de la colección completa."""
        return {key: _copy_value(value) for key, value in self._values.items()}

    @property
    def length(self) -> int:
        return len(self._values)

    def set(self, key: str, value: Value) -> None:
        self._values[key] = value

    def get(self, key: str) -> Optional[Value]:
        return self._values.get(key)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._values

    def items(self) -> Iterator[Tuple[str, Value]]:
        return iter(list(self._values.items()))

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NamedValues):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"NamedValues({self._values!r})"


def _copy_value(value: Value) -> Value:
    return list(value) if isinstance(value, list) else value
