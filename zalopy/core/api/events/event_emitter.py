"""Event emitter implementation using Observer Pattern."""
from typing import Callable, Dict, List, Optional


class EventEmitter:
    """Event emitter using Observer Pattern."""
    
    def __init__(self):
        """Initializes event emitter."""
        self._events: Dict[str, List[Callable]] = {}
    
    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers an event handler."""
        self._events.setdefault(event, []).append(callback)
        return self
    
    def once(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers a handler that is removed after its first call."""
        def wrapper(*args, **kwargs):
            self.off(event, wrapper)
            callback(*args, **kwargs)
        
        return self.on(event, wrapper)
    
    def emit(self, event: str, *args, **kwargs) -> bool:
        """Emits an event. Returns True if any handler was called."""
        callbacks = list(self._events.get(event, []))
        for callback in callbacks:
            callback(*args, **kwargs)
        return bool(callbacks)
    
    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Removes an event handler, or all handlers for the event."""
        if event not in self._events:
            return self
        
        if callback is None:
            del self._events[event]
        else:
            self._events[event] = [cb for cb in self._events[event] if cb != callback]
        
        return self
    
    def listener_count(self, event: str) -> int:
        return len(self._events.get(event, []))
