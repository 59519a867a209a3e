import inspect
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType, UnionType
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    Annotated,
)

from declarest.exceptions import BindingConfigurationError
from declarest.util import is_falsy, is_primitive, to_json_text, to_text

from .named_values import NamedValues
from .request_options import HttpMethod, RequestDescriptor


class ParameterRole(Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"


# ----------------- Marcadores para Annotated -----------------

@dataclass(frozen=True)
class Param:
    role: ClassVar[ParameterRole]
    key: Optional[str] = None


@dataclass(frozen=True)
class Path(Param):
    """Variable de la URL: ``Annotated[int, Path("id")]`` sustituye ``{id}``."""

    role: ClassVar[ParameterRole] = ParameterRole.PATH


@dataclass(frozen=True)
class Query(Param):
    """Valor de la query string; los valores falsos no se envían."""

    role: ClassVar[ParameterRole] = ParameterRole.QUERY


@dataclass(frozen=True)
class Body(Param):
    """Body de la request. Solo uno por método."""

    role: ClassVar[ParameterRole] = ParameterRole.BODY


@dataclass(frozen=True)
class Header(Param):
    """Header propio del método, con prioridad sobre el resto."""

    role: ClassVar[ParameterRole] = ParameterRole.HEADER


@dataclass(frozen=True)
class ParameterBinding:
    role: ParameterRole
    key: str
    name: str
    position: int


@dataclass(frozen=True)
class CompiledBinding:
    """Estructura compilada una sola vez al definir el método"""

    name: str
    method: HttpMethod
    path: str
    headers: Mapping[str, Any]
    signature: inspect.Signature = field(compare=False)
    path_params: Tuple[ParameterBinding, ...] = ()
    query_params: Tuple[ParameterBinding, ...] = ()
    body_param: Optional[ParameterBinding] = None
    header_params: Tuple[ParameterBinding, ...] = ()

    def with_headers(self, headers: Mapping[str, Any]) -> "CompiledBinding":
        return replace(self, headers=MappingProxyType({**self.headers, **headers}))


class BindingCompiler:
    """Responsable de compilar los metadatos de un método decorado"""

    def compile(
        self,
        func: Callable,
        method: HttpMethod,
        path: str,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> CompiledBinding:
        if not inspect.iscoroutinefunction(func):
            raise BindingConfigurationError(
                f"{func.__qualname__} debe declararse con 'async def'"
            )

        # eval_str resuelve las anotaciones en texto (``from __future__ import annotations``)
        # sin envolverlas en Optional cuando el valor por defecto es None
        sig = inspect.signature(func, eval_str=True)
        parameters = list(sig.parameters.values())
        if not parameters:
            raise BindingConfigurationError(
                f"{func.__qualname__} debe recibir la instancia del cliente como primer parámetro"
            )

        bindings: Dict[ParameterRole, List[ParameterBinding]] = {
            role: [] for role in ParameterRole
        }

        # El primer parámetro es la instancia del cliente y no participa
        for position, param in enumerate(parameters[1:]):
            marker = self._find_marker(func, param, param.annotation)
            if marker is None:
                continue

            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                raise BindingConfigurationError(
                    f"{func.__qualname__}: '{param.name}' no puede ser *args/**kwargs y tener rol {marker.role.value}"
                )

            bindings[marker.role].append(
                ParameterBinding(
                    role=marker.role,
                    key=marker.key or param.name,
                    name=param.name,
                    position=position,
                )
            )

        body_params = bindings[ParameterRole.BODY]
        if len(body_params) > 1:
            raise BindingConfigurationError(
                f"{func.__qualname__}: solo se admite un Body por método, encontrados {[p.name for p in body_params]}"
            )

        return CompiledBinding(
            name=func.__name__,
            method=method,
            path=path,
            headers=MappingProxyType(dict(headers or {})),
            signature=sig,
            path_params=tuple(bindings[ParameterRole.PATH]),
            query_params=tuple(bindings[ParameterRole.QUERY]),
            body_param=body_params[0] if body_params else None,
            header_params=tuple(bindings[ParameterRole.HEADER]),
        )

    def _find_marker(
        self, func: Callable, param: inspect.Parameter, annotation: Any
    ) -> Optional[Param]:
        annotation = _unwrap_optional(annotation)
        if get_origin(annotation) is not Annotated:
            return None

        markers = [
            item() if isinstance(item, type) else item
            for item in get_args(annotation)[1:]
            if _is_marker(item)
        ]
        if len(markers) > 1:
            raise BindingConfigurationError(
                f"{func.__qualname__}: '{param.name}' tiene más de un rol {[m.role.value for m in markers]}"
            )
        return markers[0] if markers else None


def _unwrap_optional(annotation: Any) -> Any:
    """``Optional[Annotated[T, Query()]]`` expone el ``Annotated`` interno"""
    if get_origin(annotation) not in (Union, UnionType):
        return annotation

    annotated = [arg for arg in get_args(annotation) if get_origin(arg) is Annotated]
    return annotated[0] if len(annotated) == 1 else annotation


def _is_marker(item: Any) -> bool:
    marker_type = item if isinstance(item, type) else type(item)
    return issubclass(marker_type, Param) and marker_type is not Param


class RequestBuilder:
    """Responsable de construir el RequestDescriptor de cada llamada"""

    def build(
        self,
        binding: CompiledBinding,
        client: Any,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> RequestDescriptor:
        bound = binding.signature.bind(client, *args, **kwargs)
        bound.apply_defaults()
        arguments = bound.arguments

        headers = self._combine_headers(
            client.get_default_headers(), binding, arguments
        )
        url = self._build_url(binding, arguments)
        params = self._build_query(binding, arguments)
        body = arguments[binding.body_param.name] if binding.body_param else None

        final_url = f"{client.get_base_url() or ''}{url}"
        return RequestDescriptor(final_url, binding.method, body, headers, params)

    def _combine_headers(
        self,
        default_headers: Optional[Mapping[str, Any]],
        binding: CompiledBinding,
        arguments: Mapping[str, Any],
    ) -> NamedValues:
        """Headers por defecto < headers del método < headers de parámetros"""
        headers = NamedValues(default_headers)
        for key, value in binding.headers.items():
            headers.set(key, value)
        for param in binding.header_params:
            headers.set(param.key, arguments[param.name])
        return headers

    def _build_url(self, binding: CompiledBinding, arguments: Mapping[str, Any]) -> str:
        """Sustituye los ``{key}`` de la ruta; los que no tienen valor se quedan tal cual"""
        url = binding.path
        for param in binding.path_params:
            url = url.replace(f"{{{param.key}}}", to_text(arguments[param.name]))
        return url

    def _build_query(
        self, binding: CompiledBinding, arguments: Mapping[str, Any]
    ) -> NamedValues:
        params = NamedValues()
        for param in binding.query_params:
            value = arguments[param.name]
            if is_falsy(value):
                continue
            params.set(
                param.key,
                to_text(value) if is_primitive(value) else to_json_text(value),
            )
        return params
