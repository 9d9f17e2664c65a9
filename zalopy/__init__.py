"""
zalopy - Async Python client for the Zalo private web API.

Usage:
    >>> from zalopy import ZaloClient, AppContext
    >>>
    >>> async with ZaloClient(context, service_map) as client:
    ...     results = await client.upload_attachment(["photo.jpg"], "123456")
"""
import logging
from .client import ZaloClient

# Session context
from .core.context import AppContext, ShareFileSettings, MessageType

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncAPIClient,
)

# Uploads
from .core.upload import (
    UploadCoordinator,
    UploadConfig,
    UploadProgress,
    ImageUploadResult,
    FileUploadResult,
    FileCategory,
    PendingCompletionRegistry,
)

# Errors
from .core.exceptions import (
    ZaloException,
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    PolicyError,
    CryptoError,
    ServerError,
    CorrelationError,
    CompletionTimeoutError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for zalopy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'zalopy',
        'zalopy.api',
        'zalopy.client',
        'zalopy.crypto',
        'zalopy.listener.control',
        'zalopy.upload',
        'zalopy.upload.coordinator',
        'zalopy.upload.chunk',
        'zalopy.upload.completion',
        'zalopy.upload.file',
        'zalopy.upload.registry',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'ZaloClient',
    'AppContext',
    'ShareFileSettings',
    'MessageType',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AsyncAPIClient',
    'UploadCoordinator',
    'UploadConfig',
    'UploadProgress',
    'ImageUploadResult',
    'FileUploadResult',
    'FileCategory',
    'PendingCompletionRegistry',
    'ZaloException',
    'ConfigurationError',
    'InvalidArgumentError',
    'NotFoundError',
    'PolicyError',
    'CryptoError',
    'ServerError',
    'CorrelationError',
    'CompletionTimeoutError',
    'setup_logging',
]
