"""Streaming checksum of large files."""
import hashlib
from pathlib import Path
from typing import Union

import aiofiles


class FileHasher:
    """
    Computes an MD5 checksum over a whole file without loading it at once.
    
    The file is read in fixed-size blocks (2 MiB by default).
    """
    
    BLOCK_SIZE = 2 * 1024 * 1024
    
    def __init__(self, block_size: int = BLOCK_SIZE):
        if block_size <= 0:
            raise ValueError("Block size must be positive")
        self.block_size = block_size
    
    async def md5(self, file_path: Union[str, Path]) -> str:
        """
        Compute hex MD5 digest of a file.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Lowercase hex digest
        """
        digest = hashlib.md5()
        async with aiofiles.open(file_path, 'rb') as f:
            while True:
                block = await f.read(self.block_size)
                if not block:
                    break
                digest.update(block)
        return digest.hexdigest()
