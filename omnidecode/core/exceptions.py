"""Custom exceptions for the omnidecode package.

Decoding itself never raises to the caller. ``PayloadDecodeError`` is used
internally by the tool environment decoder and is always converted into a
diagnostic. ``ConfigurationError`` signals a caller mistake at construction
time, before any text is decoded.
"""

from datetime import datetime
from typing import Optional, Dict, Any


class PayloadDecodeError(Exception):
    """Raised when a structured payload inside an environment block cannot be parsed.

    Attributes:
        message: The error message describing the failure.
        payload: The raw payload text that failed to parse.
        original_error: The original exception that caused this error.
        timestamp: When the error occurred.
    """

    def __init__(
        self,
        message: str,
        payload: str = "",
        original_error: Optional[Exception] = None
    ) -> None:
        """Initialize the PayloadDecodeError.

        Args:
            message: Descriptive error message.
            payload: The raw payload text that failed to parse.
            original_error: The original exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.payload = payload
        self.original_error = original_error
        self.timestamp = datetime.now().isoformat()

    def __str__(self) -> str:
        """Return a detailed string representation of the error."""
        error_parts = [f"Payload Decode Failed: {self.message}"]

        if self.original_error:
            error_parts.append(f"Original Error: {type(self.original_error).__name__}: {self.original_error}")

        error_parts.append(f"Payload Length: {len(self.payload)}")
        error_parts.append(f"Timestamp: {self.timestamp}")

        return " | ".join(error_parts)

    def get_full_context(self) -> Dict[str, Any]:
        """Get complete error context as a dictionary.

        Returns:
            Dictionary containing all error context information.
        """
        return {
            "error_type": "PayloadDecodeError",
            "message": self.message,
            "timestamp": self.timestamp,
            "payload": self.payload,
            "original_error": {
                "type": type(self.original_error).__name__ if self.original_error else None,
                "message": str(self.original_error) if self.original_error else None
            }
        }


class ConfigurationError(ValueError):
    """Raised when decoder configuration or environment selection is invalid.

    Attributes:
        message: The error message describing the problem.
        field: Name of the offending setting, if any.
        value: The rejected value.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value
        self.timestamp = datetime.now().isoformat()

    def __str__(self) -> str:
        error_parts = [f"Configuration Error: {self.message}"]

        if self.field:
            error_parts.append(f"Field: {self.field}")
            error_parts.append(f"Value: {self.value!r}")

        return " | ".join(error_parts)

    def get_full_context(self) -> Dict[str, Any]:
        """Get complete error context as a dictionary."""
        return {
            "error_type": "ConfigurationError",
            "message": self.message,
            "timestamp": self.timestamp,
            "field": self.field,
            "value": self.value
        }
