"""Handler for control events pushed by the real-time channel."""
from typing import Any, Dict, Iterable, Optional

from ..events import EventEmitter
from ...upload.registry import PendingCompletionRegistry
from ...logging import get_logger


class ControlEventHandler:
    """
    Routes decoded control events to the pending-completion registry.
    
    The real-time listener owns framing and decoding; it hands each batch
    of control events to handle(). A 'file_done' event resolves the upload
    waiting on that file id.
    
    Example:
        >>> handler = ControlEventHandler(registry, emitter)
        >>> handler.handle([{'content': {'act_type': 'file_done',
        ...                              'fileId': 12345,
        ...                              'data': {'url': 'https://x/y'}}}])
    """
    
    FILE_DONE = 'file_done'
    
    def __init__(
        self,
        registry: PendingCompletionRegistry,
        event_emitter: Optional[EventEmitter] = None
    ):
        """Initializes control event handler."""
        self.registry = registry
        self.event_emitter = event_emitter
        self.logger = get_logger('zalopy.listener.control')
    
    def handle(self, controls: Iterable[Dict[str, Any]]) -> int:
        """
        Handle a batch of control events.
        
        Returns:
            Number of pending uploads resolved
        """
        resolved = 0
        for control in controls:
            if self.handle_one(control):
                resolved += 1
        return resolved
    
    def handle_one(self, control: Dict[str, Any]) -> bool:
        """Handle a single control event. Returns True if an upload was resolved."""
        content = control.get('content') or {}
        if content.get('act_type') != self.FILE_DONE:
            return False
        
        file_id = content.get('fileId')
        if file_id is None:
            self.logger.warning("file_done event without fileId")
            return False
        
        payload = {
            'fileUrl': (content.get('data') or {}).get('url'),
            'fileId': file_id,
        }
        
        resolved = self.registry.resolve(file_id, payload)
        if not resolved:
            self.logger.debug(f"Dropped file_done for unknown file id {file_id}")
        
        if self.event_emitter:
            self.event_emitter.emit(self.FILE_DONE, payload)
        
        return resolved
