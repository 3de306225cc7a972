"""Azure Storage Queue transport for the message bus.

Each public operation is a single request against the queue service. Polling
cadence, retries and redelivery policy belong to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.queue import QueueServiceClient

from azurequeue_transport.modules.storagequeue.codec import MessageCodec, codec_for
from azurequeue_transport.modules.storagequeue.dsn import connection_string_from_dsn
from azurequeue_transport.modules.storagequeue.errors import (
    ConfigurationError,
    InvalidArgumentError,
    MessageDecodingError,
)
from azurequeue_transport.modules.storagequeue.models import Delivery, Message, QueueReceipt
from azurequeue_transport.modules.storagequeue.options import QueueOptions

logger = logging.getLogger(__name__)

OptionsLike = Union[QueueOptions, Mapping[str, Any], None]


class QueueTransport:
    """Sends, receives and deletes framework messages through an Azure Storage Queue."""

    def __init__(
        self,
        dsn: str,
        options: OptionsLike = None,
        *,
        service_client: Optional[Any] = None,
    ) -> None:
        self._options = options if isinstance(options, QueueOptions) else QueueOptions.from_mapping(options)
        self._connection_string = connection_string_from_dsn(dsn)
        self._codec: MessageCodec = codec_for(self._options)
        self._service_client = service_client
        self._owns_client = service_client is None
        self._queue_client: Optional[Any] = None

    @property
    def options(self) -> QueueOptions:
        return self._options

    @property
    def connection_string(self) -> str:
        return self._connection_string

    def setup(self) -> None:
        """Create the configured queue if it does not exist yet."""
        name = self._options.require_queue_name()
        queue_client = self._ensure_queue_client()
        try:
            queue_client.create_queue()
        except ResourceExistsError:
            logger.info("Queue %s already exists", name)
            return
        except AzureError as exc:
            logger.error("Failed to create queue %s: %s", name, exc)
            raise
        logger.info("Created queue %s", name)

    create = setup

    def receive(self, limit: Optional[int] = None, visibility_timeout: Optional[int] = None) -> List[Message]:
        """Read up to *limit* messages; an empty list means the queue had nothing visible.

        Messages that cannot be decoded are logged and left out. They stay on the
        queue and reappear once their visibility timeout expires; use
        :meth:`receive_deliveries` to handle them explicitly.
        """
        messages: List[Message] = []
        for delivery in self.receive_deliveries(limit=limit, visibility_timeout=visibility_timeout):
            if delivery.ok:
                messages.append(delivery.message)
            else:
                logger.error(
                    "Skipping undecodable message %s from queue %s: %s",
                    delivery.receipt.message_id,
                    self._options.queue_name,
                    delivery.error,
                )
        return messages

    get = receive

    def receive_deliveries(
        self, limit: Optional[int] = None, visibility_timeout: Optional[int] = None
    ) -> List[Delivery]:
        """Read up to *limit* messages, reporting decode failures per message."""
        name = self._options.require_queue_name()
        limit = self._options.results_limit if limit is None else limit
        if visibility_timeout is None:
            visibility_timeout = self._options.visibility_timeout
        try:
            QueueOptions(queue_name=name, results_limit=limit, visibility_timeout=visibility_timeout)
        except ConfigurationError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        queue_client = self._ensure_queue_client()
        try:
            queue_messages = list(
                queue_client.receive_messages(
                    messages_per_page=limit,
                    max_messages=limit,
                    visibility_timeout=visibility_timeout,
                )
            )
        except AzureError as exc:
            logger.error("Failed to receive messages from queue %s: %s", name, exc)
            raise

        logger.debug("Received %d message(s) from queue %s", len(queue_messages), name)
        return [self._to_delivery(queue_message) for queue_message in queue_messages]

    def send(self, message: Message) -> Message:
        """Enqueue *message* and return a copy carrying the service-assigned receipt."""
        name = self._options.require_queue_name()
        content = self._codec.encode(message)

        queue_client = self._ensure_queue_client()
        try:
            result = queue_client.send_message(content, time_to_live=self._options.time_to_live)
        except AzureError as exc:
            logger.error("Failed to send message to queue %s: %s", name, exc)
            raise

        receipt = QueueReceipt.from_queue_message(result)
        logger.debug("Sent message %s to queue %s", receipt.message_id, name)
        return message.with_original(receipt)

    def delete(
        self,
        message_or_id: Union[Message, QueueReceipt, str],
        pop_receipt: Optional[str] = None,
    ) -> None:
        """Delete one delivery, identified by a received/sent message or by id and pop receipt."""
        if isinstance(message_or_id, Message):
            if message_or_id.original is None:
                raise InvalidArgumentError("Cannot delete, missing original queue message attribute.")
            message_or_id = message_or_id.original

        if isinstance(message_or_id, QueueReceipt):
            message_id = message_or_id.message_id
            pop_receipt = message_or_id.pop_receipt
        else:
            message_id = message_or_id

        if not message_id:
            raise InvalidArgumentError("Cannot delete, missing message id.")
        if not pop_receipt:
            raise InvalidArgumentError("Cannot delete, missing pop receipt.")

        name = self._options.require_queue_name()
        queue_client = self._ensure_queue_client()
        try:
            queue_client.delete_message(message_id, pop_receipt=pop_receipt)
        except AzureError as exc:
            logger.error("Failed to delete message %s from queue %s: %s", message_id, name, exc)
            raise
        logger.debug("Deleted message %s from queue %s", message_id, name)

    def close(self) -> None:
        if self._queue_client is not None and self._owns_client:
            self._queue_client.close()
        self._queue_client = None
        if self._service_client is not None and self._owns_client:
            self._service_client.close()
            self._service_client = None

    def __enter__(self) -> "QueueTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _ensure_service_client(self) -> Any:
        if self._service_client is None:
            self._service_client = QueueServiceClient.from_connection_string(conn_str=self._connection_string)
        return self._service_client

    def _ensure_queue_client(self) -> Any:
        if self._queue_client is None:
            name = self._options.require_queue_name()
            self._queue_client = self._ensure_service_client().get_queue_client(name)
        return self._queue_client

    def _to_delivery(self, queue_message: Any) -> Delivery:
        receipt = QueueReceipt.from_queue_message(queue_message)
        try:
            message = self._codec.decode(queue_message.content, message_id=receipt.message_id)
        except MessageDecodingError as exc:
            return Delivery(receipt=receipt, error=exc)
        return Delivery(receipt=receipt, message=message.with_original(receipt))
