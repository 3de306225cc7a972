"""Builds queue transports from DSNs and environment settings."""

from __future__ import annotations

from typing import Any, Optional

from azurequeue_transport.modules.storagequeue.dsn import supports_dsn
from azurequeue_transport.modules.storagequeue.errors import ConfigurationError
from azurequeue_transport.modules.storagequeue.options import QueueOptions
from azurequeue_transport.modules.storagequeue.transport import OptionsLike, QueueTransport


class QueueTransportFactory:
    """Entry point used by the host framework to recognise and build this transport."""

    def supports(self, dsn: str, options: OptionsLike = None) -> bool:
        return supports_dsn(dsn)

    def create_transport(
        self,
        dsn: str,
        options: OptionsLike = None,
        *,
        service_client: Optional[Any] = None,
    ) -> QueueTransport:
        if not self.supports(dsn, options):
            raise ConfigurationError("DSN is not an azurequeue:// or azurequeue-connection-string:// DSN")
        return QueueTransport(dsn, options, service_client=service_client)


def create_transport_from_settings(settings: Optional[Any] = None) -> QueueTransport:
    if settings is None:
        from azurequeue_transport.core.config import settings

    dsn = (settings.AZURE_QUEUE_DSN or "").strip()
    if not dsn:
        raise ConfigurationError("AZURE_QUEUE_DSN is not configured")
    return QueueTransportFactory().create_transport(dsn, QueueOptions.from_settings(settings))
