"""Errors raised by the Azure Storage Queue transport.

Failures reported by the queue service itself are not wrapped; they surface
as ``azure.core.exceptions.AzureError`` subclasses.
"""

from typing import Optional


class QueueTransportError(Exception):
    """Base class for errors raised by this transport."""


class ConfigurationError(QueueTransportError):
    """Raised when the DSN or transport options are unusable."""


class MessageDecodingError(QueueTransportError):
    """Raised when a message cannot be encoded for, or decoded from, the queue."""

    def __init__(self, message: str, *, message_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.message_id = message_id

    def __str__(self) -> str:
        if self.message_id:
            return f"{self.message} (message_id={self.message_id})"
        return self.message


class InvalidArgumentError(QueueTransportError, ValueError):
    """Raised when an operation is called without the arguments it needs."""
