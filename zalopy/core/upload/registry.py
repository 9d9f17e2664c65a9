"""
Pending-completion registry.

Correlates an HTTP upload acknowledgment with the completion push that the
real-time channel delivers later for the same server file id.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..exceptions import CompletionTimeoutError, CorrelationError

logger = logging.getLogger('zalopy.upload.registry')


class PendingCompletionRegistry:
    """
    Maps server file ids to single-assignment futures.
    
    Each entry is created by register(), resolved exactly once by resolve()
    (normally from the real-time listener), and removed once its waiter
    has consumed it, timed out, or been cancelled. One registry is owned by
    each client instance.
    
    Example:
        >>> registry = PendingCompletionRegistry()
        >>> registry.register(12345)
        >>> # later, from the listener:
        >>> registry.resolve(12345, {'fileUrl': 'https://...'})
        >>> payload = await registry.wait(12345)
    """
    
    def __init__(self):
        self._pending: Dict[str, asyncio.Future] = {}
    
    @staticmethod
    def _key(file_id: Any) -> str:
        return str(file_id)
    
    def __contains__(self, file_id: Any) -> bool:
        return self._key(file_id) in self._pending
    
    def __len__(self) -> int:
        return len(self._pending)
    
    @property
    def pending_ids(self) -> List[str]:
        return list(self._pending)
    
    def register(self, file_id: Any) -> asyncio.Future:
        """
        Register a pending completion.
        
        Must be called from a running event loop.
        
        Raises:
            CorrelationError: If the id is already pending
        """
        key = self._key(file_id)
        existing = self._pending.get(key)
        if existing is not None and not existing.done():
            raise CorrelationError(f"File id {key} is already pending")
        
        future = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        logger.debug(f"Registered pending completion for file id {key}")
        return future
    
    def resolve(self, file_id: Any, payload: Dict[str, Any]) -> bool:
        """
        Deliver a completion payload.

        The entry stays in the table until its waiter consumes it.

        Returns:
            True if a pending entry was resolved, False if the id is unknown
        """
        future = self._pending.get(self._key(file_id))
        if future is None or future.done():
            return False
        future.set_result(payload)
        logger.debug(f"Resolved pending completion for file id {file_id}")
        return True
    
    def resolve_threadsafe(self, file_id: Any, payload: Dict[str, Any]) -> bool:
        """
        Deliver a completion payload from another thread.
        
        Returns:
            True if the id was pending when scheduled
        """
        future = self._pending.get(self._key(file_id))
        if future is None:
            return False
        future.get_loop().call_soon_threadsafe(self.resolve, file_id, payload)
        return True
    
    def reject(self, file_id: Any, error: BaseException) -> bool:
        """Fail a pending entry with an exception."""
        future = self._pending.get(self._key(file_id))
        if future is None or future.done():
            return False
        future.set_exception(error)
        return True
    
    def cancel(self, file_id: Any) -> bool:
        """Cancel and remove a pending entry."""
        future = self._pending.pop(self._key(file_id), None)
        if future is None:
            return False
        return future.cancel()
    
    def cancel_all(self) -> int:
        """Cancel every pending entry. Returns the number cancelled."""
        futures = list(self._pending.values())
        self._pending.clear()
        return sum(1 for future in futures if future.cancel())
    
    async def wait(self, file_id: Any, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Wait for the completion payload of a registered id.
        
        Args:
            file_id: Server file id
            timeout: Seconds to wait (None waits forever)
            
        Raises:
            CorrelationError: If the id was never registered
            CompletionTimeoutError: If no payload arrives within timeout
            asyncio.CancelledError: If the entry or the caller is cancelled
        """
        key = self._key(file_id)
        future = self._pending.get(key)
        if future is None:
            raise CorrelationError(f"File id {key} is not registered")
        
        try:
            return await asyncio.wait_for(future, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"No completion received for file id {key} after {timeout}s")
            raise CompletionTimeoutError(
                f"Upload completion for file {key} timed out after {timeout}s",
                file_id=key
            )
        finally:
            if self._pending.get(key) is future:
                del self._pending[key]
