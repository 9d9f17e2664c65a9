"""Crypto module: parameter cipher and file checksums."""
from .aes_crypto import ParamsCipher
from .file_hasher import FileHasher

__all__ = [
    'ParamsCipher',
    'FileHasher',
]
