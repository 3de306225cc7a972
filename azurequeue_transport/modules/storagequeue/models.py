"""Models describing messages moved through the Azure Storage Queue transport."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from azurequeue_transport.modules.storagequeue.errors import InvalidArgumentError, MessageDecodingError


@dataclass(frozen=True)
class QueueReceipt:
    """Service-assigned handle of one queue delivery.

    Both values come from the queue service (a send or a receive); the pop
    receipt is what authorises deleting that specific delivery.
    """

    message_id: str
    pop_receipt: str

    def __post_init__(self) -> None:
        if not self.message_id:
            raise InvalidArgumentError("Queue receipt requires a message id")
        if not self.pop_receipt:
            raise InvalidArgumentError("Queue receipt requires a pop receipt")

    @classmethod
    def from_queue_message(cls, queue_message: Any) -> "QueueReceipt":
        return cls(
            message_id=str(getattr(queue_message, "id", "") or ""),
            pop_receipt=str(getattr(queue_message, "pop_receipt", "") or ""),
        )


@dataclass(frozen=True)
class Message:
    """Framework message: a JSON-ish body plus headers."""

    body: str
    headers: Dict[str, Any] = field(default_factory=dict)
    original: Optional[QueueReceipt] = None

    # headers is a dict, so messages compare by value but cannot be hashed
    __hash__ = None

    def with_original(self, original: QueueReceipt) -> "Message":
        return replace(self, original=original)


@dataclass(frozen=True)
class Delivery:
    """Outcome of reading one wire message from the queue."""

    receipt: QueueReceipt
    message: Optional[Message] = None
    error: Optional[MessageDecodingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
