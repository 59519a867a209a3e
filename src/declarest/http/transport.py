from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from declarest.exceptions import InvalidRequestError

from .request_options import RequestDescriptor

RequestInterceptor = Callable[[RequestDescriptor], RequestDescriptor]


class Transport(ABC):
    """
    Interfaz del servicio HTTP que ejecuta las requests.

    - Si la request tiene éxito, el awaitable devuelve el body de la respuesta.
    - Si falla, el awaitable lanza un ``ErrorResponse``.

    El slot del interceptor no es seguro frente a modificaciones concurrentes
    desde varios hilos.
    """

    def __init__(self) -> None:
        self._request_interceptor: Optional[RequestInterceptor] = None

    @property
    def request_interceptor(self) -> Optional[RequestInterceptor]:
        return self._request_interceptor

    def set_request_interceptor(
        self, interceptor: Optional[RequestInterceptor] = None
    ) -> None:
        """
        Registra el interceptor de las requests. Con None se elimina.
        Solo hay un slot: el último registrado gana y se aplica una vez por request.
        """
        self._request_interceptor = interceptor

    def intercept(self, options: RequestDescriptor) -> RequestDescriptor:
        """Pasa la request por el interceptor registrado, si lo hay."""
        _check_request(options)
        if self._request_interceptor is None:
            return options

        intercepted = self._request_interceptor(options)
        _check_request(intercepted)
        return intercepted

    def dispatch(self, options: RequestDescriptor) -> Awaitable[Any]:
        """Valida la request de forma síncrona y devuelve el awaitable del envío, sin interceptar."""
        _check_request(options)
        return self.send(options)

    def request(self, options: RequestDescriptor) -> Awaitable[Any]:
        """Intercepta la request una sola vez y devuelve el awaitable del envío."""
        return self.dispatch(self.intercept(options))

    @abstractmethod
    async def send(self, options: RequestDescriptor) -> Any:
        """Envía la request y devuelve el body de la respuesta."""


def _check_request(options: Optional[RequestDescriptor]) -> None:
    if options is None:
        raise InvalidRequestError()
