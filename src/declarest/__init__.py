from . import exceptions
from . import http

from .exceptions import (
    ApplicationException,
    BindingConfigurationError,
    ErrorResponse,
    InvalidRequestError,
)
from .http import (
    Body,
    Header,
    HttpxTransport,
    MockHttpTransport,
    NamedValues,
    Path,
    Query,
    RequestDescriptor,
    RestClient,
    Transport,
    base_url,
    default_headers,
    headers,
)

__all__ = [
    "exceptions",
    "http",
    "ApplicationException",
    "BindingConfigurationError",
    "ErrorResponse",
    "InvalidRequestError",
    "Body",
    "Header",
    "HttpxTransport",
    "MockHttpTransport",
    "NamedValues",
    "Path",
    "Query",
    "RequestDescriptor",
    "RestClient",
    "Transport",
    "base_url",
    "default_headers",
    "headers",
]
