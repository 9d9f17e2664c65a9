"""
AES cipher for request parameters and response payloads.

The platform encrypts per-request parameters with the session key using
AES-CBC, a zero IV and PKCS#7 padding. Ciphertext travels as standard
base64 text.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import unquote

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad, unpad

from ..exceptions import CryptoError

logger = logging.getLogger('zalopy.crypto')


class ParamsCipher:
    """
    Encrypts request parameters with the session key.
    
    Example:
        >>> cipher = ParamsCipher(secret_key)
        >>> blob = cipher.encrypt_params({'chunkId': 1})
        >>> cipher.decrypt(blob)
        '{"chunkId":1}'
    """
    
    IV = b'\0' * 16
    
    def __init__(self, secret_key: Optional[str]):
        """
        Initialize cipher.
        
        Args:
            secret_key: Base64-encoded session key (zpw_enk)
        """
        self._secret_key = secret_key
    
    @staticmethod
    def serialize(params: Dict[str, Any]) -> str:
        """Serialize parameters to compact JSON, keeping insertion order."""
        return json.dumps(params, separators=(',', ':'), ensure_ascii=False)
    
    def _key(self) -> bytes:
        if not self._secret_key:
            raise CryptoError("Secret key is not available")
        try:
            key = base64.b64decode(self._secret_key)
        except (binascii.Error, ValueError) as e:
            raise CryptoError(f"Invalid secret key: {e}")
        if len(key) not in (16, 24, 32):
            raise CryptoError(f"Invalid secret key length: {len(key)}")
        return key
    
    def encrypt(self, text: str) -> str:
        """
        Encrypt text and return base64 ciphertext.
        
        Raises:
            CryptoError: If the key is missing or encryption fails
        """
        key = self._key()
        try:
            cipher = AES.new(key, AES.MODE_CBC, self.IV)
            encrypted = cipher.encrypt(pad(text.encode('utf-8'), AES.block_size))
        except (ValueError, TypeError) as e:
            logger.error(f"Parameter encryption failed: {e}")
            raise CryptoError("Failed to encrypt message")
        
        result = base64.b64encode(encrypted).decode()
        if not result:
            raise CryptoError("Failed to encrypt message")
        return result
    
    def encrypt_params(self, params: Dict[str, Any]) -> str:
        """Serialize and encrypt a parameter dict."""
        return self.encrypt(self.serialize(params))
    
    def decrypt(self, data: str) -> str:
        """
        Decrypt base64 ciphertext (optionally URL-quoted) to text.
        
        Raises:
            CryptoError: If the key is missing or the data cannot be decrypted
        """
        key = self._key()
        try:
            raw = base64.b64decode(unquote(data))
            cipher = AES.new(key, AES.MODE_CBC, self.IV)
            return unpad(cipher.decrypt(raw), AES.block_size).decode('utf-8')
        except (ValueError, TypeError, UnicodeDecodeError) as e:
            raise CryptoError(f"Failed to decrypt data: {e}")
