"""API module: HTTP client, request/response handling, events."""
from .async_client import AsyncAPIClient
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig
from .events import EventEmitter
from .notifications import ControlEventHandler
from .request import RequestBuilder, ResponseHandler

__all__ = [
    'AsyncAPIClient',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    
    # Request handling
    'RequestBuilder',
    'ResponseHandler',
    
    # Events
    'EventEmitter',
    'ControlEventHandler',
]
