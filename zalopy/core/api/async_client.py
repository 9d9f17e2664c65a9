"""
Async API client.

Owns the aiohttp session and decodes responses for the platform's private
web API.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from .config import APIConfig
from .request import RequestBuilder, ResponseHandler
from ..context import AppContext
from ..crypto import ParamsCipher
from ..exceptions import ServerError
from ..logging import get_logger


class AsyncAPIClient:
    """
    Asynchronous API client.

    Features:
    - Lazily created, reusable aiohttp session
    - Platform headers (cookie, user agent, origin) from the session context
    - Response envelope decoding with the session key

    Example:
        >>> async with AsyncAPIClient(context) as api:
        ...     data = await api.post(url, form)
    """

    def __init__(self, context: AppContext, config: Optional[APIConfig] = None):
        """
        Initialize async API client.

        Args:
            context: Session context
            config: API configuration (uses defaults if not provided)
        """
        self._context = context
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False
        self._builder = RequestBuilder(
            context.api_version, context.api_type, self._config.origin
        )

        self._logger = get_logger('zalopy.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def context(self) -> AppContext:
        return self._context

    async def __aenter__(self) -> 'AsyncAPIClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
            self._connector = None

    def build_url(self, base_url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build a request URL with protocol version fields."""
        return self._builder.build_url(base_url, params)

    def _headers(self) -> Dict[str, str]:
        return self._builder.build_headers(
            cookie=self._context.cookie,
            user_agent=self._context.user_agent or self._config.user_agent,
            extra=self._config.extra_headers
        )

    async def post(
        self,
        url: str,
        data: Any = None,
        encrypted: bool = True
    ) -> Any:
        """
        POST to the API and decode the response envelope.

        Args:
            url: Full request URL
            data: Request body (aiohttp.FormData, bytes, or dict)
            encrypted: Whether the response payload is encrypted

        Returns:
            Decoded 'data' object of the response

        Raises:
            ServerError: If the request fails or the server reports an error
        """
        if self._closed:
            raise ServerError("Client is closed")

        session = await self._ensure_session()

        try:
            async with session.post(
                url,
                data=data,
                headers=self._headers(),
                **self._config.get_request_kwargs()
            ) as response:
                text = await response.text()
                self._logger.debug(
                    f"Response {response.status}: {text[:300] if len(text) > 300 else text}"
                )
                handler = ResponseHandler(ParamsCipher(self._context.secret_key))
                return handler.handle(response.status, text, encrypted)
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error: {e}")
            raise ServerError(f"Network error: {e}")
        except asyncio.TimeoutError:
            self._logger.error(f"Request timed out: {url.split('?')[0]}")
            raise ServerError("Request timed out")
