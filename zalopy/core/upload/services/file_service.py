"""
File classification and reading services.

Single Responsibility: Each class handles one specific task.
"""
import asyncio
from pathlib import Path
from typing import Tuple, Union
import logging

import aiofiles
from PIL import Image, UnidentifiedImageError

from ..models import FileCategory, FileMetadata
from ...context import ShareFileSettings
from ...exceptions import NotFoundError, PolicyError


class FileClassifier:
    """
    Classifies files and extracts category-specific metadata.
    
    Responsibilities:
    - Check file existence
    - Enforce the restricted extension list and the size limit
    - Read image dimensions (decoding the header with Pillow)
    """
    
    def __init__(self, settings: ShareFileSettings):
        self._settings = settings
        self._logger = logging.getLogger('zalopy.upload.file')
    
    @staticmethod
    def get_extension(path: Path) -> str:
        """Extension without the leading dot, lower-cased."""
        return path.suffix[1:].lower()
    
    async def classify(self, file_path: Union[str, Path]) -> Tuple[Path, FileCategory, FileMetadata]:
        """
        Classify a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (path, category, metadata)
            
        Raises:
            NotFoundError: If the file does not exist
            PolicyError: If the extension is restricted or the file is too large
        """
        path = Path(file_path)
        if not path.is_file():
            raise NotFoundError("File not found", path=str(path))
        
        extension = self.get_extension(path)
        file_name = path.name
        
        if self._settings.is_restricted(extension):
            raise PolicyError(f'File extension "{extension}" is not allowed')
        
        category = FileCategory.from_extension(extension)
        if category is FileCategory.IMAGE:
            metadata = await self.read_image_metadata(path)
        else:
            metadata = FileMetadata(file_name=file_name, total_size=path.stat().st_size)
        
        if metadata.total_size > self._settings.max_size_bytes:
            raise PolicyError(
                f"File {file_name} size exceed maximum size of "
                f"{self._settings.max_size_share_file_v3}MB"
            )
        
        self._logger.debug(
            f"Classified {file_name} as {category.value} ({metadata.total_size} bytes)"
        )
        return path, category, metadata
    
    async def read_image_metadata(self, path: Path) -> FileMetadata:
        """
        Read image width, height and size.
        
        Raises:
            PolicyError: If the file is not a decodable image
        """
        loop = asyncio.get_running_loop()
        try:
            width, height = await loop.run_in_executor(None, self._read_dimensions, path)
        except (UnidentifiedImageError, OSError) as e:
            raise PolicyError(f"File {path.name} is not a valid image: {e}")
        
        return FileMetadata(
            file_name=path.name,
            total_size=path.stat().st_size,
            width=width,
            height=height
        )
    
    @staticmethod
    def _read_dimensions(path: Path) -> Tuple[int, int]:
        with Image.open(path) as img:
            return img.size


class AsyncFileReader:
    """
    Asynchronous file reader for chunk-based reading.
    
    Uses aiofiles for non-blocking I/O. Every read opens its own handle,
    so concurrent chunk reads on one file are safe.
    """
    
    def __init__(self):
        """Initialize file reader."""
        self._logger = logging.getLogger('zalopy.upload.file')
    
    async def read_chunk(
        self,
        file_path: Path,
        start: int,
        end: int
    ) -> bytes:
        """
        Read a chunk from a file.
        
        Args:
            file_path: Path to the file
            start: Start position in bytes
            end: End position in bytes
            
        Returns:
            Chunk data; shorter than end - start if the file ends first
            
        Raises:
            OSError: If the file cannot be opened or read
        """
        try:
            async with aiofiles.open(file_path, 'rb') as f:
                await f.seek(start)
                data = await f.read(end - start)
        except OSError as e:
            self._logger.error(f"Failed to read chunk {start}-{end} of {file_path}: {e}")
            raise
        
        self._logger.debug(f"Read chunk: {start}-{end} ({len(data)} bytes)")
        return data
