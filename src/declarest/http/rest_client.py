import functools
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, TypeVar

from opentelemetry import trace

from declarest.exceptions import BindingConfigurationError, ErrorResponse
from declarest.telemetry import get_logger
from declarest.telemetry.manager import TelemetryManager

from .binding import BindingCompiler, CompiledBinding, RequestBuilder
from .named_values import Value
from .request_options import HttpMethod
from .transport import RequestInterceptor, Transport

C = TypeVar("C", bound=Type["RestClient"])
F = TypeVar("F", bound=Callable[..., Any])

BINDING_ATTR = "__declarest_binding__"
HEADERS_ATTR = "__declarest_headers__"

logger = get_logger(__name__)

_compiler = BindingCompiler()
_builder = RequestBuilder()


class RestClient:
    """
    Clase base de los clientes REST declarativos.

    Los métodos decorados con ``@get``, ``@post``, etc. construyen la request a
    partir de sus argumentos y la envían a través del ``Transport``.
    """

    __base_url__: Optional[str] = None
    __default_headers__: Optional[Mapping[str, Value]] = None

    def __init__(self, transport: Transport, tracer_name: str = "declarest"):
        self._transport = transport
        self.telemetry = TelemetryManager(trace.get_tracer(tracer_name))

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def request_interceptor(self) -> Optional[RequestInterceptor]:
        return self._transport.request_interceptor

    def set_request_interceptor(
        self, interceptor: Optional[RequestInterceptor] = None
    ) -> None:
        """
        Permite leer y modificar la request antes de enviarla.
        Con None se elimina el interceptor actual. Solo hay uno: el último gana.
        El slot es el del transporte: los clientes que lo comparten comparten el interceptor.
        No es seguro cambiarlo desde varios hilos sin sincronización externa.
        """
        self._transport.set_request_interceptor(interceptor)

    def get_base_url(self) -> Optional[str]:
        """Base de la URL del API REST."""
        return type(self).__base_url__

    def get_default_headers(self) -> Optional[Dict[str, Value]]:
        """Headers que se añaden a todas las requests."""
        headers = type(self).__default_headers__
        return dict(headers) if headers is not None else None


# ----------------- Decoradores de clase -----------------

def base_url(url: str) -> Callable[[C], C]:
    """Establece la URL base del API: ``@base_url("http://...")``"""

    def decorator(cls: C) -> C:
        _check_client_class(cls, "base_url")
        cls.__base_url__ = url
        return cls

    return decorator


def default_headers(headers: Mapping[str, Value]) -> Callable[[C], C]:
    """Establece los headers por defecto: ``@default_headers({"Header": "value"})``"""

    def decorator(cls: C) -> C:
        _check_client_class(cls, "default_headers")
        cls.__default_headers__ = MappingProxyType(dict(headers))
        return cls

    return decorator


def _check_client_class(cls: Any, decorator_name: str) -> None:
    if not (isinstance(cls, type) and issubclass(cls, RestClient)):
        raise BindingConfigurationError(
            f"@{decorator_name} solo se puede aplicar a subclases de RestClient"
        )


# ----------------- Decoradores de método -----------------

def headers(headers_def: Mapping[str, Value]) -> Callable[[F], F]:
    """Headers propios de un método. Se puede aplicar antes o después del verbo HTTP."""

    def decorator(func: F) -> F:
        binding: Optional[CompiledBinding] = getattr(func, BINDING_ATTR, None)
        if binding is not None:
            return _make_stub(func.__wrapped__, binding.with_headers(headers_def))

        setattr(func, HEADERS_ATTR, {**getattr(func, HEADERS_ATTR, {}), **headers_def})
        return func

    return decorator


def _make_http_method_decorator(method: HttpMethod):
    """Factory de los decoradores HTTP (@get, @post, etc.)"""

    def method_decorator(
        path: str, *, headers: Optional[Mapping[str, Value]] = None
    ) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            if getattr(func, BINDING_ATTR, None) is not None:
                raise BindingConfigurationError(
                    f"{func.__qualname__} ya tiene un verbo HTTP asignado"
                )
            static_headers = {**getattr(func, HEADERS_ATTR, {}), **(headers or {})}
            binding = _compiler.compile(func, method, path, static_headers)
            return _make_stub(func, binding)

        return decorator

    return method_decorator


def _make_stub(func: Callable, binding: CompiledBinding):
    @functools.wraps(func)
    async def inner(self, *args, **kwargs) -> Any:
        return await invoke(self, binding, args, kwargs)

    setattr(inner, BINDING_ATTR, binding)
    return inner


get = _make_http_method_decorator("GET")
post = _make_http_method_decorator("POST")
put = _make_http_method_decorator("PUT")
patch = _make_http_method_decorator("PATCH")
delete = _make_http_method_decorator("DELETE")
head = _make_http_method_decorator("HEAD")


# ----------------- Invocación -----------------

async def invoke(
    client: RestClient,
    binding: CompiledBinding,
    args: Tuple[Any, ...],
    kwargs: Dict[str, Any],
) -> Any:
    """Construye la request de una llamada, aplica el interceptor y la envía"""
    telemetry = client.telemetry
    transport = client.transport
    interceptor = transport.request_interceptor

    with telemetry.create_main_span(binding.method, binding.path) as main_span:
        telemetry.set_main_span_attributes(
            main_span, binding, type(client).__name__, interceptor is not None
        )
        try:
            with telemetry.step("build_request") as build_span:
                options = _builder.build(binding, client, args, kwargs)
                telemetry.set_build_attributes(build_span, binding, options)

            if interceptor is not None:
                with telemetry.step("intercept"):
                    options = transport.intercept(options)

            logger.debug(
                "request.dispatch",
                client=type(client).__name__,
                operation=binding.name,
                method=options.method,
                url=options.get_url(),
            )

            with telemetry.step("dispatch"):
                result = await transport.dispatch(options)

        except ErrorResponse as e:
            logger.warning(
                "request.failed",
                operation=binding.name,
                status=e.status,
                url=e.url,
                message=e.message,
            )
            telemetry.set_error_attributes(main_span, e)
            telemetry.finish_span_error(main_span, e, False)
            raise
        except Exception as e:
            telemetry.set_error_attributes(main_span, e)
            telemetry.finish_span_error(main_span, e, False)
            raise

        telemetry.finish_span_ok(main_span)
        return result
