"""Tests for the pending-completion registry."""
import asyncio

import pytest

from zalopy.core.exceptions import CompletionTimeoutError, CorrelationError
from zalopy.core.upload import PendingCompletionRegistry


class TestPendingCompletionRegistry:
    """Test suite for PendingCompletionRegistry."""
    
    @pytest.fixture
    def registry(self):
        return PendingCompletionRegistry()
    
    @pytest.mark.asyncio
    async def test_resolve_wakes_waiter(self, registry):
        """Test payload delivered to the waiter."""
        registry.register(12345)
        waiter = asyncio.ensure_future(registry.wait(12345))
        await asyncio.sleep(0)
        
        assert not waiter.done()
        assert registry.resolve(12345, {'fileUrl': 'https://x/y'})
        
        assert await waiter == {'fileUrl': 'https://x/y'}
        assert 12345 not in registry
    
    @pytest.mark.asyncio
    async def test_resolve_before_wait(self, registry):
        """Test a push between register and wait is not lost."""
        registry.register("777")
        registry.resolve("777", {'fileUrl': 'u'})
        
        assert "777" in registry
        assert await registry.wait("777") == {'fileUrl': 'u'}
        assert len(registry) == 0
    
    @pytest.mark.asyncio
    async def test_int_and_str_ids_match(self, registry):
        """Test ids are compared by their string form."""
        registry.register(42)
        
        assert registry.resolve("42", {'fileUrl': 'u'})
        assert await registry.wait(42) == {'fileUrl': 'u'}
    
    @pytest.mark.asyncio
    async def test_resolve_unknown(self, registry):
        """Test resolving an unknown id is a no-op."""
        assert registry.resolve(999, {'fileUrl': 'u'}) is False
        assert len(registry) == 0
    
    @pytest.mark.asyncio
    async def test_resolve_twice(self, registry):
        """Test second resolution is ignored."""
        registry.register(1)
        
        assert registry.resolve(1, {'fileUrl': 'first'})
        assert registry.resolve(1, {'fileUrl': 'second'}) is False
        assert await registry.wait(1) == {'fileUrl': 'first'}
    
    @pytest.mark.asyncio
    async def test_duplicate_register(self, registry):
        """Test registering a pending id twice fails."""
        registry.register(1)
        
        with pytest.raises(CorrelationError):
            registry.register(1)
    
    @pytest.mark.asyncio
    async def test_wait_unregistered(self, registry):
        """Test waiting on an id that was never registered."""
        with pytest.raises(CorrelationError):
            await registry.wait(1)
    
    @pytest.mark.asyncio
    async def test_timeout(self, registry):
        """Test missing push raises and clears the entry."""
        registry.register(1)
        
        with pytest.raises(CompletionTimeoutError) as exc_info:
            await registry.wait(1, timeout=0.05)
        
        assert exc_info.value.file_id == "1"
        assert 1 not in registry
        assert registry.resolve(1, {'fileUrl': 'late'}) is False
    
    @pytest.mark.asyncio
    async def test_reject(self, registry):
        """Test rejecting a pending entry."""
        registry.register(1)
        registry.reject(1, RuntimeError("boom"))
        
        with pytest.raises(RuntimeError, match="boom"):
            await registry.wait(1)
        assert len(registry) == 0
    
    @pytest.mark.asyncio
    async def test_cancel(self, registry):
        """Test cancelling wakes the waiter with CancelledError."""
        registry.register(1)
        waiter = asyncio.ensure_future(registry.wait(1))
        await asyncio.sleep(0)
        
        assert registry.cancel(1)
        
        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert len(registry) == 0
    
    @pytest.mark.asyncio
    async def test_cancelled_waiter_clears_entry(self, registry):
        """Test cancelling the waiting task removes the entry."""
        registry.register(1)
        waiter = asyncio.ensure_future(registry.wait(1))
        await asyncio.sleep(0)
        
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        
        assert len(registry) == 0
    
    @pytest.mark.asyncio
    async def test_cancel_all(self, registry):
        """Test cancelling every pending entry."""
        futures = [registry.register(i) for i in range(3)]
        
        assert registry.cancel_all() == 3
        assert len(registry) == 0
        assert all(f.cancelled() for f in futures)
    
    @pytest.mark.asyncio
    async def test_register_after_completion(self, registry):
        """Test an id can be reused once its entry is consumed."""
        registry.register(1)
        registry.resolve(1, {'fileUrl': 'a'})
        await registry.wait(1)
        
        registry.register(1)
        assert registry.pending_ids == ["1"]
    
    @pytest.mark.asyncio
    async def test_resolve_threadsafe(self, registry):
        """Test resolution from another thread."""
        registry.register(5)
        loop = asyncio.get_running_loop()
        
        scheduled = await loop.run_in_executor(
            None, registry.resolve_threadsafe, 5, {'fileUrl': 'from-thread'}
        )
        
        assert scheduled
        assert await registry.wait(5, timeout=1) == {'fileUrl': 'from-thread'}
