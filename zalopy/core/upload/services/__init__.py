"""Upload services module."""
from .validator import PreconditionValidator
from .file_service import FileClassifier, AsyncFileReader
from .plan_service import ChunkPlanner, ClientIdGenerator
from .chunk_service import ChunkDispatcher
from .completion_service import CompletionCorrelator

__all__ = [
    'PreconditionValidator',
    'FileClassifier',
    'AsyncFileReader',
    'ChunkPlanner',
    'ClientIdGenerator',
    'ChunkDispatcher',
    'CompletionCorrelator',
]
