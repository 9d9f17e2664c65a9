"""
Protocol definitions for upload module.

Defines the narrow interfaces the coordinator depends on.
"""
from typing import Any, Dict, Optional, Protocol
from pathlib import Path


class ApiClientProtocol(Protocol):
    """Protocol for the HTTP API client."""
    
    def build_url(self, base_url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build a request URL with protocol version fields."""
        ...
    
    async def post(self, url: str, data: Any = None, encrypted: bool = True) -> Any:
        """
        POST a request and return the decoded response data.
        
        Raises:
            ServerError: If the platform reports an error
        """
        ...


class ParamsEncryptorProtocol(Protocol):
    """Protocol for per-request parameter encryption."""
    
    def encrypt_params(self, params: Dict[str, Any]) -> str:
        """
        Serialize and encrypt request parameters.
        
        Raises:
            CryptoError: If encryption fails
        """
        ...


class FileReaderProtocol(Protocol):
    """Protocol for file reading operations."""
    
    async def read_chunk(
        self, 
        file_path: Path, 
        start: int, 
        end: int
    ) -> bytes:
        """
        Read a chunk from a file.
        
        Returns:
            Chunk data; short if the file ends before end
            
        Raises:
            OSError: If the file cannot be read
        """
        ...
