"""
Data models for upload module.

Uses dataclasses for the per-call upload plan and the result records.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class FileCategory(str, Enum):
    """Attachment category; drives endpoint choice and metadata shape."""
    IMAGE = 'image'
    VIDEO = 'video'
    OTHERS = 'others'

    @classmethod
    def from_extension(cls, extension: str) -> 'FileCategory':
        ext = extension.lower()
        if ext in IMAGE_EXTENSIONS:
            return cls.IMAGE
        if ext in VIDEO_EXTENSIONS:
            return cls.VIDEO
        return cls.OTHERS

    @property
    def is_async(self) -> bool:
        """True if completion arrives later through the real-time channel."""
        return self is not FileCategory.IMAGE


IMAGE_EXTENSIONS = frozenset({'jpg', 'jpeg', 'png', 'webp'})
VIDEO_EXTENSIONS = frozenset({'mp4'})


@dataclass(frozen=True)
class FileMetadata:
    """
    Metadata extracted from a local file.

    Attributes:
        file_name: Base name of the file
        total_size: Size in bytes
        width: Image width in pixels (images only)
        height: Image height in pixels (images only)
    """
    file_name: str
    total_size: int
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class ChunkInfo:
    """
    Information about a file chunk.

    Attributes:
        index: Zero-based chunk index
        start: Start position in bytes
        end: End position in bytes (exclusive)
    """
    index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        """Returns chunk size."""
        return self.end - self.start


@dataclass
class UploadParams:
    """
    Per-file parameter template sent (encrypted) with every chunk.

    chunk_id is the only mutable field; it starts at 1 and is advanced
    once per dispatched chunk.
    """
    total_chunk: int
    file_name: str
    client_id: int
    total_size: int
    imei: str
    to_id: Optional[str] = None
    group_id: Optional[str] = None
    is_e2ee: int = 0
    jxl: int = 0
    chunk_id: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire parameter dict."""
        result: Dict[str, Any] = {}
        if self.group_id is not None:
            result['grid'] = self.group_id
        else:
            result['toid'] = self.to_id
        result.update({
            'totalChunk': self.total_chunk,
            'fileName': self.file_name,
            'clientId': self.client_id,
            'totalSize': self.total_size,
            'imei': self.imei,
            'isE2EE': self.is_e2ee,
            'jxl': self.jxl,
            'chunkId': self.chunk_id,
        })
        return result


@dataclass
class UploadTask:
    """
    Upload plan for one input file.

    Attributes:
        index: Position of the file in the caller's list
        file_path: Path to the file
        category: File category
        metadata: Extracted metadata
        params: Parameter template
        chunks: Ordered chunk ranges
    """
    index: int
    file_path: Path
    category: FileCategory
    metadata: FileMetadata
    params: UploadParams
    chunks: List[ChunkInfo] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


@dataclass
class UploadConfig:
    """
    Configuration for an upload call.

    Attributes:
        max_concurrent_requests: Bound on in-flight chunk requests (None = unbounded)
        completion_timeout: Seconds to wait for a completion push (None = forever)
        ordered: Return results in input order instead of completion order
    """
    max_concurrent_requests: Optional[int] = None
    completion_timeout: Optional[float] = None
    ordered: bool = False

    def __post_init__(self):
        if self.max_concurrent_requests is not None and self.max_concurrent_requests <= 0:
            raise ValueError("max_concurrent_requests must be positive")
        if self.completion_timeout is not None and self.completion_timeout <= 0:
            raise ValueError("completion_timeout must be positive")


@dataclass(frozen=True)
class ImageUploadResult:
    """
    Result of an image upload (completed synchronously).

    Attributes:
        photo_id: Server-assigned photo id
        width: Image width
        height: Image height
        total_size: File size in bytes
        hd_size: HD size in bytes (same as total_size)
        normal_url: Normal-size URL
        hd_url: HD URL
        thumb_url: Thumbnail URL
        client_file_id: Client id echoed by the server
        chunk_id: Chunk id of the final acknowledgment
        finished: Server 'finished' flag
        response: Raw response payload
    """
    photo_id: str
    width: Optional[int]
    height: Optional[int]
    total_size: int
    hd_size: int
    normal_url: Optional[str] = None
    hd_url: Optional[str] = None
    thumb_url: Optional[str] = None
    client_file_id: Optional[Any] = None
    chunk_id: Optional[int] = None
    finished: Optional[int] = None
    response: Dict[str, Any] = field(default_factory=dict)

    file_type = FileCategory.IMAGE

    @classmethod
    def from_response(cls, response: Dict[str, Any], metadata: FileMetadata) -> 'ImageUploadResult':
        return cls(
            photo_id=response.get('photoId'),
            width=metadata.width,
            height=metadata.height,
            total_size=metadata.total_size,
            hd_size=metadata.total_size,
            normal_url=response.get('normalUrl'),
            hd_url=response.get('hdUrl'),
            thumb_url=response.get('thumbUrl'),
            client_file_id=response.get('clientFileId'),
            chunk_id=response.get('chunkId'),
            finished=response.get('finished'),
            response=dict(response),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the platform's camelCase record."""
        return {
            'fileType': self.file_type.value,
            'width': self.width,
            'height': self.height,
            'totalSize': self.total_size,
            'hdSize': self.hd_size,
            **self.response,
        }


@dataclass(frozen=True)
class FileUploadResult:
    """
    Result of a video/other upload (completed by a later push).

    Attributes:
        file_type: VIDEO or OTHERS
        file_id: Server-assigned file id
        file_url: Final file URL from the push
        checksum: MD5 hex digest of the whole local file
        total_size: File size in bytes
        file_name: File name
        client_file_id: Client id echoed by the server
        chunk_id: Chunk id of the final acknowledgment
        finished: Server 'finished' flag
        response: Merged response and push payload
    """
    file_type: FileCategory
    file_id: str
    file_url: Optional[str]
    checksum: str
    total_size: int
    file_name: str
    client_file_id: Optional[Any] = None
    chunk_id: Optional[int] = None
    finished: Optional[int] = None
    response: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payloads(
        cls,
        category: FileCategory,
        response: Dict[str, Any],
        push: Dict[str, Any],
        metadata: FileMetadata,
        checksum: str
    ) -> 'FileUploadResult':
        merged = {
            'fileType': category.value,
            **response,
            **push,
            'totalSize': metadata.total_size,
            'fileName': metadata.file_name,
            'checksum': checksum,
        }
        return cls(
            file_type=category,
            file_id=merged.get('fileId'),
            file_url=merged.get('fileUrl'),
            checksum=checksum,
            total_size=metadata.total_size,
            file_name=metadata.file_name,
            client_file_id=merged.get('clientFileId'),
            chunk_id=merged.get('chunkId'),
            finished=merged.get('finished'),
            response=merged,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the platform's camelCase record."""
        return dict(self.response)


UploadResult = Union[ImageUploadResult, FileUploadResult]


@dataclass
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        total_chunks: Total number of chunks across all files
        uploaded_chunks: Number of acknowledged chunks
        total_bytes: Total bytes across all files
        uploaded_bytes: Bytes acknowledged so far
    """
    total_chunks: int
    uploaded_chunks: int = 0
    total_bytes: int = 0
    uploaded_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_chunks == 0:
            return 0.0
        return (self.uploaded_chunks / self.total_chunks) * 100
