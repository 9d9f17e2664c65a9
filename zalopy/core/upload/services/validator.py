"""
Precondition validation.

Checks the session context and call arguments before any file is touched.
"""
from typing import Sequence

from ...context import AppContext
from ...exceptions import ConfigurationError, InvalidArgumentError


class PreconditionValidator:
    """
    Validates an upload call.
    
    Responsibilities:
    - Check the session context is populated
    - Check the file list and destination against platform limits
    """
    
    def validate_context(self, context: AppContext) -> None:
        """
        Raises:
            ConfigurationError: If a required session field is missing
        """
        missing = context.missing_fields()
        if missing:
            raise ConfigurationError(f"{missing[0]} is not available")
        if context.settings is None:
            raise ConfigurationError("Share file settings are not available")
    
    def validate_request(
        self,
        context: AppContext,
        file_paths: Sequence,
        thread_id: str
    ) -> None:
        """
        Raises:
            InvalidArgumentError: If arguments are missing or over the limit
        """
        if not file_paths:
            raise InvalidArgumentError("Missing filePaths")
        
        max_file = context.settings.max_file
        if len(file_paths) > max_file:
            raise InvalidArgumentError(f"Exceed maximum file of {max_file}")
        
        if not thread_id:
            raise InvalidArgumentError("Missing threadId")
    
    def validate(self, context: AppContext, file_paths: Sequence, thread_id: str) -> None:
        """Run all precondition checks."""
        self.validate_context(context)
        self.validate_request(context, file_paths, thread_id)
