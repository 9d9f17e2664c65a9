"""
Completion correlation service.

Turns a final chunk acknowledgment into an upload result. Images complete
with the HTTP response; videos and other files complete when the real-time
channel pushes a completion for the server file id.
"""
from typing import Any, Dict, Optional
import logging

from ..models import FileUploadResult, ImageUploadResult, UploadResult, UploadTask
from ..registry import PendingCompletionRegistry
from ...crypto import FileHasher


class CompletionCorrelator:
    """
    Assembles upload results.
    
    Responsibilities:
    - Build image results straight from the response
    - Register video/other uploads and wait for their push
    - Checksum the whole file once the push arrives
    """
    
    def __init__(
        self,
        registry: PendingCompletionRegistry,
        hasher: Optional[FileHasher] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize correlator.
        
        Args:
            registry: Pending-completion registry shared with the listener
            hasher: File checksum service
            timeout: Seconds to wait for a push (None waits forever)
        """
        self._registry = registry
        self._hasher = hasher or FileHasher()
        self._timeout = timeout
        self._logger = logging.getLogger('zalopy.upload.completion')
    
    async def complete(self, task: UploadTask, response: Dict[str, Any]) -> UploadResult:
        """
        Build the result for a final acknowledgment.
        
        Raises:
            CompletionTimeoutError: If the push does not arrive in time
        """
        if not task.category.is_async:
            return ImageUploadResult.from_response(response, task.metadata)
        
        file_id = response.get('fileId')
        self._registry.register(file_id)
        self._logger.debug(f"Waiting for completion of {task.metadata.file_name} (file id {file_id})")
        
        push = await self._registry.wait(file_id, timeout=self._timeout)
        checksum = await self._hasher.md5(task.file_path)
        
        self._logger.debug(f"Completion received for {task.metadata.file_name}: {push.get('fileUrl')}")
        return FileUploadResult.from_payloads(
            task.category, response, push, task.metadata, checksum
        )
