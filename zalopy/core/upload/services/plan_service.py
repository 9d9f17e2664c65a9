"""
Chunk planning service.

Turns a classified file into an UploadTask: chunk ranges plus the
parameter template sent with every chunk.
"""
import time
from pathlib import Path
from typing import Callable, Optional

from ..models import ChunkInfo, FileCategory, FileMetadata, UploadParams, UploadTask
from ..strategies import FixedSizeChunkingStrategy


class ClientIdGenerator:
    """
    Issues client file ids.
    
    Seeded from wall-clock milliseconds; every id is strictly greater than
    the previous one, also across calls.
    """
    
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._last = 0
    
    def next_id(self) -> int:
        now = int(self._clock() * 1000)
        self._last = max(now, self._last + 1)
        return self._last


class ChunkPlanner:
    """
    Builds upload plans.
    
    Responsibilities:
    - Compute chunk ranges with a fixed chunk size
    - Build the per-file parameter template
    """
    
    def __init__(self, chunk_size: int, id_generator: Optional[ClientIdGenerator] = None):
        self._chunking = FixedSizeChunkingStrategy(chunk_size)
        self._ids = id_generator or ClientIdGenerator()
    
    @property
    def chunk_size(self) -> int:
        return self._chunking.chunk_size
    
    def plan(
        self,
        index: int,
        path: Path,
        category: FileCategory,
        metadata: FileMetadata,
        thread_id: str,
        imei: str,
        is_group: bool = False
    ) -> UploadTask:
        """
        Create the upload task for one file.
        
        Args:
            index: Position of the file in the caller's list
            path: File path
            category: File category
            metadata: Extracted metadata
            thread_id: Destination user or group id
            imei: Device id
            is_group: Whether the destination is a group
        """
        chunks = [
            ChunkInfo(index=i, start=start, end=end)
            for i, (start, end) in enumerate(
                self._chunking.calculate_chunks(metadata.total_size)
            )
        ]
        
        params = UploadParams(
            total_chunk=self._chunking.chunk_count(metadata.total_size),
            file_name=metadata.file_name,
            client_id=self._ids.next_id(),
            total_size=metadata.total_size,
            imei=imei,
            to_id=None if is_group else thread_id,
            group_id=thread_id if is_group else None,
        )
        
        return UploadTask(
            index=index,
            file_path=path,
            category=category,
            metadata=metadata,
            params=params,
            chunks=chunks
        )
