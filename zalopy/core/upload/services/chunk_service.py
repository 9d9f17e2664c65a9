"""
Chunk dispatch service.

Sends individual chunks to the category-specific upload endpoint.
"""
from typing import Any, Dict, Optional
import logging
import time

import aiohttp

from ..models import ChunkInfo, FileCategory, UploadTask
from ..protocols import ApiClientProtocol


class ChunkDispatcher:
    """
    Uploads chunks as multipart requests.

    Responsibilities:
    - Build the endpoint URL for a category and thread type
    - Send chunk bytes in a 'chunkContent' part
    - Tell intermediate acknowledgments apart from final ones
    """

    URL_SEGMENTS = {
        FileCategory.IMAGE: 'photo_original/upload',
        FileCategory.VIDEO: 'asyncfile/upload',
        FileCategory.OTHERS: 'asyncfile/upload',
    }

    DIRECT_TYPE = '2'
    GROUP_TYPE = '11'

    SENTINEL_ID = -1

    def __init__(
        self,
        api_client: ApiClientProtocol,
        service_url: str
    ):
        """
        Initialize chunk dispatcher.

        Args:
            api_client: API client used to post requests
            service_url: File service base URL (e.g. 'https://host/api')
        """
        self._api = api_client
        self._service_url = service_url.rstrip('/')
        self._logger = logging.getLogger('zalopy.upload.chunk')

    def build_url(self, category: FileCategory, is_group: bool, encrypted_params: str) -> str:
        """Build the upload URL for a chunk."""
        base = (
            f"{self._service_url}/{'group' if is_group else 'message'}/"
            f"{self.URL_SEGMENTS[category]}"
        )
        return self._api.build_url(base, {
            'type': self.GROUP_TYPE if is_group else self.DIRECT_TYPE,
            'params': encrypted_params,
        })

    @staticmethod
    def build_form(file_name: str, data: bytes) -> aiohttp.FormData:
        """Build the multipart body for a chunk."""
        form = aiohttp.FormData()
        form.add_field(
            'chunkContent',
            data,
            filename=file_name,
            content_type='application/octet-stream'
        )
        return form

    @classmethod
    def is_final(cls, response: Any) -> bool:
        """True if a response carries a server-assigned file or photo id."""
        if not isinstance(response, dict):
            return False
        for key in ('fileId', 'photoId'):
            value = response.get(key)
            if value is not None and str(value) == str(cls.SENTINEL_ID):
                return False
        return True

    async def dispatch(
        self,
        task: UploadTask,
        chunk: ChunkInfo,
        data: bytes,
        url: str
    ) -> Optional[Dict[str, Any]]:
        """
        Upload a single chunk.

        Args:
            task: Upload task the chunk belongs to
            chunk: Chunk range
            data: Chunk bytes
            url: Upload URL carrying the encrypted parameters for this chunk

        Returns:
            Response data for a final acknowledgment, None for an intermediate one

        Raises:
            ServerError: If the server rejects the chunk
        """
        file_name = task.metadata.file_name
        chunk_size_kb = len(data) / 1024
        upload_start = time.time()
        self._logger.debug(
            f"Uploading {file_name} chunk {chunk.index + 1}/{task.chunk_count} ({chunk_size_kb:.1f} KB)"
        )

        form = self.build_form(file_name, data)
        try:
            response = await self._api.post(url, form)
        except Exception as e:
            upload_time = time.time() - upload_start
            self._logger.error(
                f"{file_name} chunk {chunk.index + 1} failed after {upload_time:.2f}s: {e}"
            )
            raise

        upload_time = time.time() - upload_start
        if not self.is_final(response):
            self._logger.debug(
                f"{file_name} chunk {chunk.index + 1} acknowledged in {upload_time:.2f}s (intermediate)"
            )
            return None

        self._logger.debug(f"{file_name} chunk {chunk.index + 1} acknowledged in {upload_time:.2f}s (final)")
        return response
