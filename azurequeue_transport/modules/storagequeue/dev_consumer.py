"""Standalone queue poller for local testing."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from azurequeue_transport.modules.storagequeue.models import Message
from azurequeue_transport.modules.storagequeue.transport import QueueTransport

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Message], None]


def consume(
    transport: QueueTransport,
    handler: MessageHandler,
    *,
    poll_interval: float = 5.0,
    max_polls: Optional[int] = None,
    stop: Optional[Callable[[], bool]] = None,
    delete_undecodable: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll *transport* and hand each message to *handler*.

    Messages are deleted once the handler returns. If the handler raises, the
    message is left alone and comes back after its visibility timeout.
    Returns the number of messages handled successfully.
    """
    handled = 0
    polls = 0
    while not (stop and stop()):
        if max_polls is not None and polls >= max_polls:
            break
        polls += 1

        deliveries = transport.receive_deliveries()
        if not deliveries:
            sleep(poll_interval)
            continue

        for delivery in deliveries:
            if not delivery.ok:
                logger.error("Undecodable message %s: %s", delivery.receipt.message_id, delivery.error)
                if delete_undecodable:
                    transport.delete(delivery.receipt)
                continue

            try:
                handler(delivery.message)
            except Exception as exc:
                logger.exception("Handler failed for message %s: %s", delivery.receipt.message_id, exc)
                continue
            transport.delete(delivery.message)
            handled += 1
    return handled


def _log_message(message: Message) -> None:
    logger.info("Message headers=%s body=%s", message.headers, message.body)


def main() -> None:
    from azurequeue_transport.core.config import settings
    from azurequeue_transport.modules.storagequeue.factory import create_transport_from_settings

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    with create_transport_from_settings(settings) as transport:
        transport.setup()
        logger.info("Polling queue %s. Press Ctrl+C to stop.", transport.options.queue_name)
        try:
            consume(
                transport,
                _log_message,
                poll_interval=settings.AZURE_QUEUE_POLL_INTERVAL_SECONDS,
            )
        except KeyboardInterrupt:
            pass
        logger.info("Queue poller stopped.")


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
