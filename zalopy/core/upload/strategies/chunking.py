"""
Chunking strategies for file uploads.

Implements Strategy Pattern for chunking algorithms.
"""
from abc import ABC, abstractmethod
from typing import List, Tuple


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""
    
    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """Calculate chunk boundaries."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size chunking strategy.
    
    Every chunk is chunk_size bytes except possibly the last one, so the
    number of chunks is ceil(file_size / chunk_size).
    """
    
    DEFAULT_CHUNK_SIZE = 3 * 1024 * 1024  # 3MB
    
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.
        
        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
    
    def chunk_count(self, file_size: int) -> int:
        """Number of chunks for a file of file_size bytes."""
        return -(-file_size // self.chunk_size)
    
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate fixed-size chunk boundaries.
        
        Args:
            file_size: Total file size in bytes
            
        Returns:
            List of (start, end) tuples
        """
        return [
            (start, min(start + self.chunk_size, file_size))
            for start in range(0, file_size, self.chunk_size)
        ]
