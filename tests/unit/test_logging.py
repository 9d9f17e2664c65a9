"""Tests for logging helpers."""
import logging

import zalopy
from zalopy.core.logging import get_logger


class TestGetLogger:
    """Test suite for get_logger."""
    
    def test_returns_named_logger(self):
        logger = get_logger('zalopy.test.named')
        
        assert logger.name == 'zalopy.test.named'
        assert logger.propagate is True
    
    def test_same_instance(self):
        assert get_logger('zalopy.test.same') is get_logger('zalopy.test.same')


class TestSetupLogging:
    """Test suite for setup_logging."""
    
    def test_sets_level_on_package_loggers(self):
        zalopy.setup_logging(logging.DEBUG)
        try:
            assert logging.getLogger('zalopy.upload.coordinator').level == logging.DEBUG
            assert logging.getLogger('zalopy.listener.control').level == logging.DEBUG
        finally:
            zalopy.setup_logging(logging.WARNING)
