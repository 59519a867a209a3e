from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import httpx

from declarest.exceptions import ErrorResponse
from declarest.exceptions._constants import NETWORKERROR, UNKNOWN_ERROR
from declarest.util import is_falsy

from .request_options import RequestDescriptor
from .transport import Transport


@dataclass
class ResponseOptions:
    """Respuesta preparada que devolverá el transporte simulado"""

    status: int
    status_text: Optional[str] = None
    body: Any = None
    headers: Optional[Mapping[str, Any]] = None
    error: Any = None
    callback: Optional[Callable[[RequestDescriptor], Any]] = None


class MockHttpTransport(Transport):
    """
    Transporte simulado para tests unitarios.
    Permite indicar la respuesta que se devolverá o simular errores del cliente.
    """

    def __init__(self) -> None:
        super().__init__()
        self._request_options: Optional[RequestDescriptor] = None
        self._response_options = ResponseOptions(status=200, body={})
        self.request_count = 0

    @property
    def request_options(self) -> Optional[RequestDescriptor]:
        """Última request recibida (None antes de la primera)."""
        return self._request_options

    def callback(self, handler: Callable[[RequestDescriptor], Any]) -> None:
        """
        Cada request siguiente se delega en ``handler``.
        Para simular un error basta con que el handler lance la excepción.
        """
        self._response_options = ResponseOptions(status=0, callback=handler)

    def response(
        self,
        body: Any = None,
        status: int = 200,
        status_text: Optional[str] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Respuesta HTTP que se devolverá en las siguientes requests (body por defecto {})."""
        self._response_options = ResponseOptions(
            status=status,
            status_text=status_text,
            body={} if body is None else body,
            headers=headers,
        )

    def client_error(self, error: Any) -> None:
        """Las siguientes requests fallarán con el error de cliente indicado."""
        self._response_options = ResponseOptions(status=NETWORKERROR, error=error)

    def offline(self) -> None:
        """Simula que no hay conexión de red."""
        self._response_options = ResponseOptions(
            status=NETWORKERROR,
            status_text=UNKNOWN_ERROR,
            error=httpx.ConnectError("Network is unreachable"),
        )

    async def send(self, options: RequestDescriptor) -> Any:
        self._request_options = options
        self.request_count += 1

        response = self._response_options

        if response.callback is not None:
            return response.callback(options)

        if 200 <= response.status < 400:
            return response.body

        raise ErrorResponse(
            error=response.error if is_falsy(response.body) else response.body,
            headers=response.headers,
            status=response.status,
            status_text=response.status_text,
            url=options.url,
        )
