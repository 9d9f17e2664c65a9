"""
Upload module for attachment uploads.

Splits files into chunks, sends them with encrypted per-request parameters
and correlates completion across the HTTP response and the real-time push.
"""
from .coordinator import UploadCoordinator
from .registry import PendingCompletionRegistry
from .models import (
    FileCategory,
    FileMetadata,
    UploadConfig,
    UploadResult,
    ImageUploadResult,
    FileUploadResult,
    UploadProgress,
)
from .protocols import (
    ApiClientProtocol,
    ParamsEncryptorProtocol,
    FileReaderProtocol,
)

__all__ = [
    # Main classes
    'UploadCoordinator',
    'PendingCompletionRegistry',
    
    # Models
    'FileCategory',
    'FileMetadata',
    'UploadConfig',
    'UploadResult',
    'ImageUploadResult',
    'FileUploadResult',
    'UploadProgress',
    
    # Protocols
    'ApiClientProtocol',
    'ParamsEncryptorProtocol',
    'FileReaderProtocol',
]
