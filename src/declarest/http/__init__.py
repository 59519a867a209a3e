from .named_values import NamedValues, StringMap
from .request_options import HttpMethod, RequestDescriptor
from .transport import RequestInterceptor, Transport
from .binding import (
    Body,
    CompiledBinding,
    Header,
    ParameterBinding,
    ParameterRole,
    Path,
    Query,
)
from .rest_client import (
    RestClient,
    base_url,
    default_headers,
    headers,
    get,
    post,
    put,
    patch,
    delete,
    head,
    invoke,
)
from .mock_transport import MockHttpTransport
from .httpx_transport import HttpxTransport

__all__ = [
    "NamedValues",
    "StringMap",
    "HttpMethod",
    "RequestDescriptor",
    "RequestInterceptor",
    "Transport",
    "Body",
    "CompiledBinding",
    "Header",
    "ParameterBinding",
    "ParameterRole",
    "Path",
    "Query",
    "RestClient",
    "base_url",
    "default_headers",
    "headers",
    "get",
    "post",
    "put",
    "patch",
    "delete",
    "head",
    "invoke",
    "MockHttpTransport",
    "HttpxTransport",
]
