from ._exception import (
    ApplicationException,
    ConfigurationException,
    BindingConfigurationError,
    InvalidRequestError,
    HttpApiException,
    ErrorResponse,
)

__all__ = [
    "ApplicationException",
    "ConfigurationException",
    "BindingConfigurationError",
    "InvalidRequestError",
    "HttpApiException",
    "ErrorResponse",
]
