"""Transport options with their defaults, validated once at construction."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from azurequeue_transport.modules.storagequeue.errors import ConfigurationError

# The queue service returns at most 32 messages per request.
MAX_RESULTS_LIMIT = 32


@dataclass(frozen=True)
class QueueOptions:
    """Recognised transport options.

    ``visibility_timeout`` and ``time_to_live`` are in seconds; ``None`` leaves
    the service default in place. A ``time_to_live`` of -1 keeps the message
    until it is deleted.
    """

    queue_name: str = ""
    visibility_timeout: Optional[int] = None
    results_limit: int = 1
    time_to_live: Optional[int] = None
    body_only: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.queue_name, str):
            raise ConfigurationError("queue_name must be a string")
        _check_int("visibility_timeout", self.visibility_timeout, optional=True)
        _check_int("results_limit", self.results_limit)
        _check_int("time_to_live", self.time_to_live, optional=True)
        if not isinstance(self.body_only, bool):
            raise ConfigurationError("body_only must be a boolean")

        if self.visibility_timeout is not None and self.visibility_timeout < 0:
            raise ConfigurationError("visibility_timeout cannot be negative")
        if not 1 <= self.results_limit <= MAX_RESULTS_LIMIT:
            raise ConfigurationError(f"results_limit must be between 1 and {MAX_RESULTS_LIMIT}")
        if self.time_to_live is not None and (self.time_to_live == 0 or self.time_to_live < -1):
            raise ConfigurationError("time_to_live must be positive, or -1 for messages that never expire")

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "QueueOptions":
        options = dict(options or {})
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown queue transport option(s): {', '.join(unknown)}")
        return cls(**options)

    @classmethod
    def from_settings(cls, settings: Any) -> "QueueOptions":
        return cls(
            queue_name=(settings.AZURE_QUEUE_NAME or "").strip(),
            visibility_timeout=settings.AZURE_QUEUE_VISIBILITY_TIMEOUT,
            results_limit=settings.AZURE_QUEUE_RESULTS_LIMIT,
            time_to_live=settings.AZURE_QUEUE_TIME_TO_LIVE,
            body_only=settings.AZURE_QUEUE_BODY_ONLY,
        )

    def require_queue_name(self) -> str:
        name = self.queue_name.strip()
        if not name:
            raise ConfigurationError(
                "Could not use a queue with an empty name. Configure the queue_name option to fix this error."
            )
        return name


def _check_int(name: str, value: Any, *, optional: bool = False) -> None:
    if value is None and optional:
        return
    # bool is an int subclass but never a valid count of seconds or messages
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer")
