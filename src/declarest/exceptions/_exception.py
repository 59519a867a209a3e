from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from ._constants import (
    BADREQUEST,
    INTERNALSERVERERROR,
    NETWORKERROR,
    SUCCESS_RANGE,
    UNKNOWN_URL,
)

if TYPE_CHECKING:
    from declarest.http.named_values import NamedValues


# ----------------- Excepciones Base -----------------

class ApplicationException(Exception):
    """
    Excepción base de la librería.
    Contiene los campos comunes a todos los errores (mensaje, estado y causa).
    """
    def __init__(
        self,
        message: str,
        status: int = INTERNALSERVERERROR,
        error: Optional[Any] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.error = error
        self.cause = cause
        self.exception = type(self).__name__


# ----------------- Configuration Exceptions -----------------

class ConfigurationException(ApplicationException):
    """Errores de configuración detectados al definir o arrancar el cliente."""


class BindingConfigurationError(ConfigurationException):
    """Metadatos de binding mal formados (p.ej. dos Body en un mismo método)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, error="Binding Configuration Error", cause=cause)


# ----------------- Invocation Exceptions -----------------

class InvalidRequestError(ApplicationException):
    """El transporte se invocó sin descriptor de request."""

    def __init__(self, message: str = "Invalid request data"):
        super().__init__(message, status=BADREQUEST, error="Invalid Request")


# ----------------- HTTP API Exceptions -----------------

class HttpApiException(ApplicationException):
    """Errores en llamadas a APIs externas."""


class ErrorResponse(HttpApiException):
    """
    Fallo normalizado de una llamada HTTP.

    Se construye en la frontera del transporte. El mensaje se calcula una sola
    vez al construir:

    - estado 2xx: la respuesta llegó pero el body no era utilizable, ``error``
      se fuerza a ``None``.
    - cualquier otro estado (incluido 0 para fallos de red): ``error``
      conserva el valor recibido.
    """

    ok = False

    def __init__(
        self,
        error: Any = None,
        headers: Optional[Union["NamedValues", Mapping[str, Any]]] = None,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        from declarest.http.named_values import NamedValues

        status = NETWORKERROR if status is None else status
        status_text = "" if status_text is None else status_text

        if status in SUCCESS_RANGE:
            error = None
            message = f"Http failure during parsing for {url or UNKNOWN_URL}"
        else:
            message = (
                f"Http failure response for {url or UNKNOWN_URL}: "
                f"{status} {status_text}"
            )

        cause = error if isinstance(error, BaseException) else None
        super().__init__(message, status=status, error=error, cause=cause)
        self.status_text = status_text
        self.url = url
        self.headers = NamedValues(headers)

    @classmethod
    def from_init(cls, init: Optional[Mapping[str, Any]] = None) -> "ErrorResponse":
        """Crea el error a partir de un diccionario (acepta claves camelCase o snake_case)."""
        init = init or {}
        return cls(
            error=init.get("error"),
            headers=init.get("headers"),
            status=init.get("status"),
            status_text=init.get("status_text", init.get("statusText")),
            url=init.get("url"),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, "
            f"status_text={self.status_text!r}, url={self.url!r})"
        )
