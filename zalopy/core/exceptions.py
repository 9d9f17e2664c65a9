"""
Custom exceptions for zalopy.

This module defines the exception classes raised by the upload subsystem
and the API layer.
"""
from typing import Optional


class ZaloException(Exception):
    """Base exception for all zalopy errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(ZaloException):
    """Raised when the session context is missing a required field."""
    pass


class InvalidArgumentError(ZaloException):
    """Raised when call arguments are missing or exceed platform limits."""
    pass


class NotFoundError(ZaloException):
    """Raised when a local file does not exist or cannot be read."""
    
    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)


class PolicyError(ZaloException):
    """Raised when a file violates an extension or size policy."""
    pass


class CryptoError(ZaloException):
    """Raised when request parameters cannot be encrypted or decrypted."""
    pass


class ServerError(ZaloException):
    """
    Raised when the platform rejects a request.
    
    Attributes:
        code: Error code reported by the server (None for transport errors)
    """
    
    def __init__(self, message: str, code: Optional[int] = None) -> None:
        self.code = code
        super().__init__(message, code)
    
    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code {self.code})"


class CorrelationError(ZaloException):
    """Raised when a file id is registered twice while still pending."""
    pass


class CompletionTimeoutError(ZaloException):
    """Raised when a completion push does not arrive in time."""
    
    def __init__(self, message: str, file_id: Optional[str] = None) -> None:
        self.file_id = file_id
        super().__init__(message)
