"""Wire encodings for queue messages.

Queue message text is always base64. Inside it is either a versioned JSON
envelope (``{"v": 1, "body": ..., "headers": {...}}``) or, in body-only mode,
the JSON body itself with the headers folded in under ``__headers`` so that
consumers outside the framework can read it.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from azurequeue_transport.modules.storagequeue.errors import MessageDecodingError
from azurequeue_transport.modules.storagequeue.models import Message
from azurequeue_transport.modules.storagequeue.options import QueueOptions

HEADERS_KEY = "__headers"
ENVELOPE_VERSION = 1


class MessageEnvelope(BaseModel):
    """Full-envelope wire format."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    version: Literal[1] = Field(default=ENVELOPE_VERSION, alias="v")
    body: str
    headers: Dict[str, Any] = Field(default_factory=dict)


class MessageCodec:
    """Base class for the message encodings."""

    def encode(self, message: Message) -> str:
        raise NotImplementedError

    def decode(self, text: str, *, message_id: Optional[str] = None) -> Message:
        raise NotImplementedError


class EnvelopeCodec(MessageCodec):
    def encode(self, message: Message) -> str:
        try:
            envelope = MessageEnvelope(body=message.body, headers=dict(message.headers))
            payload = envelope.model_dump_json(by_alias=True)
        except (ValidationError, PydanticSerializationError) as exc:
            raise MessageDecodingError(f"Failed to encode message for transport: {exc}") from exc
        return _b64encode(payload)

    def decode(self, text: str, *, message_id: Optional[str] = None) -> Message:
        payload = _b64decode(text, message_id=message_id)
        try:
            envelope = MessageEnvelope.model_validate_json(payload)
        except ValidationError as exc:
            raise MessageDecodingError(
                f"Failed to decode message envelope from transport: {exc.error_count()} error(s)",
                message_id=message_id,
            ) from exc
        return Message(body=envelope.body, headers=dict(envelope.headers))


class BodyOnlyCodec(MessageCodec):
    def encode(self, message: Message) -> str:
        try:
            data = json.loads(message.body)
        except (TypeError, ValueError, RecursionError) as exc:
            raise MessageDecodingError(f"Failed to decode message body for transport: {exc}") from exc
        if not isinstance(data, dict):
            raise MessageDecodingError("Failed to decode message body for transport: body is not a JSON object")

        data[HEADERS_KEY] = dict(message.headers)
        try:
            combined = _dumps(data)
        except (TypeError, ValueError, RecursionError) as exc:
            raise MessageDecodingError(f"Failed to re-encode message for transport: {exc}") from exc
        return _b64encode(combined)

    def decode(self, text: str, *, message_id: Optional[str] = None) -> Message:
        payload = _b64decode(text, message_id=message_id)
        try:
            data = json.loads(payload)
        except (ValueError, RecursionError) as exc:
            raise MessageDecodingError(
                f"Failed to decode message from transport: {exc}", message_id=message_id
            ) from exc
        if not isinstance(data, dict):
            raise MessageDecodingError(
                "Failed to decode message from transport: payload is not a JSON object", message_id=message_id
            )

        if HEADERS_KEY not in data:
            return Message(body=payload, headers={})

        headers = data.pop(HEADERS_KEY)
        if not isinstance(headers, dict):
            raise MessageDecodingError(
                f"Failed to decode message from transport: {HEADERS_KEY} is not a JSON object",
                message_id=message_id,
            )
        try:
            body = _dumps(data)
        except (TypeError, ValueError, RecursionError) as exc:
            raise MessageDecodingError(
                f"Failed to re-encode message from transport: {exc}", message_id=message_id
            ) from exc
        return Message(body=body, headers=headers)


def codec_for(options: QueueOptions) -> MessageCodec:
    if options.body_only:
        return BodyOnlyCodec()
    return EnvelopeCodec()


def _dumps(data: Dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(text: str, *, message_id: Optional[str]) -> str:
    try:
        raw = base64.b64decode(text or "", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise MessageDecodingError(
            f"Failed to decode base64 message text from transport: {exc}", message_id=message_id
        ) from exc
