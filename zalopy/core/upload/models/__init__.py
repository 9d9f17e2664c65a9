"""Upload models."""
from .upload_models import (
    FileCategory,
    FileMetadata,
    ChunkInfo,
    UploadParams,
    UploadTask,
    UploadConfig,
    ImageUploadResult,
    FileUploadResult,
    UploadResult,
    UploadProgress,
    IMAGE_EXTENSIONS,
    VIDEO_EXTENSIONS,
)

__all__ = [
    'FileCategory',
    'FileMetadata',
    'ChunkInfo',
    'UploadParams',
    'UploadTask',
    'UploadConfig',
    'ImageUploadResult',
    'FileUploadResult',
    'UploadResult',
    'UploadProgress',
    'IMAGE_EXTENSIONS',
    'VIDEO_EXTENSIONS',
]
