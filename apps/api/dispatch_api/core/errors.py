"""
Exceptions raised by the service layer
"""
from typing import Any, Dict, Optional


class SchedulingError(Exception):
    """Base exception for scheduling service errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class DataSourceError(SchedulingError):
    """Raised when stored shifts, employees or requirements cannot be read or written"""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATA_SOURCE_UNAVAILABLE", details)
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["operation"] = self.operation
        return result

