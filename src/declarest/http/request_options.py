from typing import Any, Literal, Mapping, Optional, Union
from urllib.parse import quote

from declarest.util import is_falsy, is_primitive, to_json_text, to_text

from .named_values import NamedValues

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]

CONTENT_TYPE = "Content-Type"
ACCEPTS = "Accepts"
JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"
DEFAULT_ACCEPTS = "application/json, text/plain, */*"

# Encoding de encodeURIComponent; '@ : $ , ; ? /' se dejan legibles en la query.
# '+' y '=' se mantienen escapados: un '+' literal se decodifica como espacio.
_QUERY_SAFE = "!*'()" + "@:$,;?/"

NamedValuesInit = Optional[Union[NamedValues, Mapping[str, Any]]]


class RequestDescriptor:
    """Request HTTP completamente resuelta y lista para enviar.

    - url: URL de la request (sin query string)
    - method: método HTTP (p.ej. GET)
    - body: contenido opcional; se serializa en ``get_serialized_body``
    - headers: headers HTTP; siempre incluyen Content-Type y Accepts
    - params: parámetros de query que se añaden en ``get_url``
    """

    def __init__(
        self,
        url: str,
        method: HttpMethod,
        body: Any = None,
        headers: NamedValuesInit = None,
        params: NamedValuesInit = None,
    ):
        self.url = url
        self.method = method
        self.body = body
        self.headers = NamedValues(headers)
        self.params = NamedValues(params)

        if not self.headers.contains(CONTENT_TYPE):
            self.headers.set(CONTENT_TYPE, self.get_content_type())

        if not self.headers.contains(ACCEPTS):
            self.headers.set(ACCEPTS, DEFAULT_ACCEPTS)

    def get_content_type(self) -> str:
        """Devuelve el Content-Type indicado o lo detecta a partir del body."""
        specified = self.headers.get(CONTENT_TYPE)
        if specified:
            return specified if isinstance(specified, str) else ", ".join(specified)

        if is_falsy(self.body) or not is_primitive(self.body):
            return JSON_CONTENT_TYPE

        return TEXT_CONTENT_TYPE

    def get_serialized_body(self) -> Optional[Union[str, bytes]]:
        """Devuelve el body serializado según el Content-Type, o None si no hay body."""
        if is_falsy(self.body):
            return None

        if media_type(self.get_content_type()) == JSON_CONTENT_TYPE:
            return to_json_text(self.body)

        if isinstance(self.body, (bytes, bytearray)):
            return bytes(self.body)

        return to_text(self.body)

    def get_url(self) -> str:
        """URL final incluyendo la query string."""
        if not self.params.length:
            return self.url

        query = "&".join(
            f"{encode_query_component(key)}={encode_query_component(value)}"
            for key, value in self.params.items()
        )

        query_index = self.url.find("?")
        if query_index < 0:
            separator = "?"
        elif query_index < len(self.url) - 1:
            separator = "&"
        else:
            separator = ""

        return f"{self.url}{separator}{query}"

    def __repr__(self) -> str:
        return f"RequestDescriptor(method={self.method!r}, url={self.get_url()!r})"


def media_type(content_type: str) -> str:
    """Tipo de medio sin parámetros: ``application/json; charset=utf-8`` -> ``application/json``"""
    return content_type.split(";", 1)[0].strip().lower()


def encode_query_component(value: Any) -> str:
    if isinstance(value, list):
        value = ",".join(to_text(item) for item in value)
    return quote(to_text(value), safe=_QUERY_SAFE)
