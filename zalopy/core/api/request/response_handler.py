"""Response handler for API responses."""
import json
from typing import Any, Optional

from ...crypto import ParamsCipher
from ...exceptions import CryptoError, ServerError


class ResponseHandler:
    """
    Decodes the platform's response envelope.
    
    The outer envelope is {"error_code", "error_message", "data"}. When the
    response is encrypted, "data" is a ciphertext that decrypts to another
    envelope of the same shape.
    """
    
    def __init__(self, cipher: Optional[ParamsCipher] = None):
        """Initializes response handler."""
        self._cipher = cipher
    
    @staticmethod
    def parse_response(text: str) -> Any:
        """Parses JSON response text."""
        try:
            return json.loads(text)
        except ValueError:
            raise ServerError("Failed to parse response data")
    
    @staticmethod
    def check_envelope(envelope: Any) -> Any:
        """Raises ServerError if the envelope reports an error, returns its data."""
        if not isinstance(envelope, dict):
            raise ServerError("Failed to parse response data")
        
        code = envelope.get('error_code', 0)
        if code not in (0, None):
            raise ServerError(envelope.get('error_message') or "Unknown error", code)
        
        return envelope.get('data')
    
    def handle(self, status: int, text: str, encrypted: bool = True) -> Any:
        """
        Process a raw HTTP response.
        
        Args:
            status: HTTP status code
            text: Response body
            encrypted: Whether the payload data is encrypted
            
        Returns:
            Decoded 'data' object
            
        Raises:
            ServerError: On HTTP failure or error envelope
        """
        if status < 200 or status >= 300:
            raise ServerError(f"Request failed with status code {status}")
        
        data = self.check_envelope(self.parse_response(text))
        if not encrypted:
            return data
        
        if self._cipher is None:
            raise CryptoError("No cipher configured for encrypted response")
        if not isinstance(data, str):
            raise ServerError("Failed to parse response data")
        
        inner = self.parse_response(self._cipher.decrypt(data))
        return self.check_envelope(inner)
