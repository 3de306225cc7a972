"""Azure Storage Queue transport for the message bus."""

from .errors import ConfigurationError, InvalidArgumentError, MessageDecodingError, QueueTransportError
from .factory import QueueTransportFactory, create_transport_from_settings
from .models import Delivery, Message, QueueReceipt
from .options import QueueOptions
from .transport import QueueTransport

__all__ = [
    "ConfigurationError",
    "Delivery",
    "InvalidArgumentError",
    "Message",
    "MessageDecodingError",
    "QueueOptions",
    "QueueReceipt",
    "QueueTransport",
    "QueueTransportError",
    "QueueTransportFactory",
    "create_transport_from_settings",
]
