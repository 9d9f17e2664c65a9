"""
ZaloClient - high-level async client for attachment uploads.

Example:
    >>> context = AppContext(secret_key=..., imei=..., cookie=..., user_agent=...)
    >>> context.load_settings(server_info)
    >>> async with ZaloClient(context, service_map) as client:
    ...     # the real-time listener calls client.handle_control_events(controls)
    ...     results = await client.upload_attachment(["a.png", "b.mp4"], "123456")
"""
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .core.api import APIConfig, AsyncAPIClient, ControlEventHandler, EventEmitter
from .core.context import AppContext, MessageType
from .core.exceptions import ConfigurationError
from .core.logging import get_logger
from .core.upload import (
    PendingCompletionRegistry,
    UploadConfig,
    UploadCoordinator,
    UploadProgress,
    UploadResult,
)
from .core.upload.services import ClientIdGenerator

logger = get_logger('zalopy.client')


class ZaloClient:
    """
    High-level async client.

    Owns the HTTP client, the pending-completion registry and the event
    emitter. The real-time listener (not part of this package) feeds its
    decoded control events into handle_control_events() so that video and
    file uploads can complete.

    Args:
        context: Session context from login
        service_map: zpw_service_map_v3 from login (uses the 'file' entry)
        file_service_url: Explicit file service base URL (overrides service_map)
        config: API configuration
        registry: Pending-completion registry (a new one per client by default)
        api_client: Preconfigured API client
    """

    def __init__(
        self,
        context: AppContext,
        service_map: Optional[Dict[str, List[str]]] = None,
        file_service_url: Optional[str] = None,
        config: Optional[APIConfig] = None,
        registry: Optional[PendingCompletionRegistry] = None,
        api_client: Optional[AsyncAPIClient] = None
    ):
        self._context = context
        self._service_url = file_service_url or self._file_service_url(service_map)
        self._api = api_client or AsyncAPIClient(context, config)
        self._registry = registry if registry is not None else PendingCompletionRegistry()
        self._events = EventEmitter()
        self._client_ids = ClientIdGenerator()
        self._control_handler = ControlEventHandler(self._registry, self._events)

    @staticmethod
    def _file_service_url(service_map: Optional[Dict[str, List[str]]]) -> str:
        hosts = (service_map or {}).get('file') or []
        if not hosts:
            raise ConfigurationError("File service URL is not available")
        return f"{hosts[0].rstrip('/')}/api"

    @property
    def context(self) -> AppContext:
        return self._context

    @property
    def registry(self) -> PendingCompletionRegistry:
        return self._registry

    @property
    def service_url(self) -> str:
        return self._service_url

    async def __aenter__(self) -> 'ZaloClient':
        await self._api.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Cancel pending completions and close the HTTP client."""
        cancelled = self._registry.cancel_all()
        if cancelled:
            logger.warning(f"Cancelled {cancelled} pending upload completion(s)")
        await self._api.close()

    def on(self, event: str, callback: Callable) -> 'ZaloClient':
        """Register an event handler ('file_done')."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'ZaloClient':
        """Remove an event handler."""
        self._events.off(event, callback)
        return self

    def handle_control_events(self, controls: Iterable[Dict[str, Any]]) -> int:
        """
        Feed control events from the real-time channel.

        Returns:
            Number of pending uploads resolved
        """
        return self._control_handler.handle(controls)

    async def upload_attachment(
        self,
        file_paths: Sequence[Union[str, Path]],
        thread_id: str,
        message_type: MessageType = MessageType.DIRECT_MESSAGE,
        config: Optional[UploadConfig] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ) -> List[UploadResult]:
        """
        Upload attachments to a thread.

        Args:
            file_paths: Paths of the files to upload
            thread_id: User or group id
            message_type: Direct or group thread
            config: Upload configuration (concurrency bound, push timeout, ordering)
            progress_callback: Called after every acknowledged chunk

        Returns:
            List of ImageUploadResult / FileUploadResult

        Raises:
            ZaloException: Any error of the upload subsystem

        Example:
            >>> results = await client.upload_attachment(
            ...     ["photo.jpg", "clip.mp4"],
            ...     "123456",
            ...     MessageType.GROUP_MESSAGE,
            ...     config=UploadConfig(completion_timeout=120)
            ... )
            >>> [r.file_type for r in results]
        """
        coordinator = UploadCoordinator(
            api_client=self._api,
            context=self._context,
            service_url=self._service_url,
            registry=self._registry,
            id_generator=self._client_ids,
            progress_callback=progress_callback
        )
        return await coordinator.upload(file_paths, thread_id, message_type, config)
