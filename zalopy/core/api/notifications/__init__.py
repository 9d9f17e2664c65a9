"""Real-time channel notification handlers."""
from .control_handler import ControlEventHandler

__all__ = [
    'ControlEventHandler',
]
