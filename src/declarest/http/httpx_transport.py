from typing import Any, List, Optional, Tuple

import httpx

from declarest.config import TransportConfig
from declarest.exceptions import ErrorResponse
from declarest.exceptions._constants import NETWORKERROR, UNKNOWN_ERROR
from declarest.telemetry import get_logger
from declarest.util import to_text

from .named_values import NamedValues
from .request_options import RequestDescriptor
from .transport import Transport

logger = get_logger(__name__)


class HttpxTransport(Transport):
    """
    Transporte real sobre ``httpx.AsyncClient``.

    No reintenta ni cachea: cada fallo se convierte en un único ``ErrorResponse``.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[TransportConfig] = None,
    ):
        super().__init__()
        self.config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.timeout,
            verify=self.config.verify_tls,
            follow_redirects=self.config.follow_redirects,
            headers=self.config.headers,
        )

    @classmethod
    def from_config(cls, config: TransportConfig) -> "HttpxTransport":
        return cls(config=config)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, options: RequestDescriptor) -> Any:
        try:
            response = await self._client.request(
                options.method,
                options.get_url(),
                content=options.get_serialized_body(),
                headers=self._build_headers(options.headers),
            )
        except httpx.HTTPError as e:
            logger.warning("transport.network_error", url=options.url, error=str(e))
            raise ErrorResponse(
                error=e,
                status=NETWORKERROR,
                status_text=UNKNOWN_ERROR,
                url=options.url,
            ) from e

        headers = NamedValues(dict(response.headers))
        url = str(response.url)

        if not response.is_success:
            raise ErrorResponse(
                error=self._read_error_body(response),
                headers=headers,
                status=response.status_code,
                status_text=response.reason_phrase,
                url=url,
            )

        try:
            return self._parse_body(response)
        except ValueError as e:
            # 2xx con un body que no se puede interpretar
            raise ErrorResponse(
                error=e,
                headers=headers,
                status=response.status_code,
                status_text=response.reason_phrase,
                url=url,
            ) from e

    def _build_headers(self, headers: NamedValues) -> List[Tuple[str, str]]:
        """Los valores en lista se envían como headers repetidos; los None no se envían"""
        result: List[Tuple[str, str]] = []
        for key, value in headers.items():
            values = value if isinstance(value, list) else [value]
            result.extend((key, to_text(item)) for item in values if item is not None)
        return result

    def _parse_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return None

        content_type = response.headers.get("content-type", "").lower()
        if "json" in content_type:
            return response.json()
        return response.text

    def _read_error_body(self, response: httpx.Response) -> Any:
        try:
            return self._parse_body(response)
        except ValueError:
            return response.text
