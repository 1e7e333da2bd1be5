"""Custom exception classes."""

from typing import Optional


class FuzzyHighlightError(Exception):
    """Base exception for all library errors."""
    
    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)
