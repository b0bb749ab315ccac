"""
Custom exceptions for the brisk-log package.
"""


class BriskLogError(Exception):
    """Base exception for all brisk-log errors."""

    pass


class InvalidOptionError(BriskLogError, ValueError):
    """Raised when a logger option fails validation."""

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []

        if self.fields:
            message = f"Invalid logger option ({', '.join(self.fields)}): {message}"

        super().__init__(message)
