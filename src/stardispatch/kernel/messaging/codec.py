"""Kernel messaging – JSON wire codec for ``StarAddedEvent``.

Wire format: ``{"id": int, "title": str, "description": str, "stars": int}``,
UTF-8 encoded, no envelope-level versioning.
"""
from __future__ import annotations

import json
from typing import Any

from stardispatch.kernel.errors import SerializationError
from stardispatch.kernel.messaging.message import MessageSerializer, StarAddedEvent

_FIELDS: dict[str, type] = {"id": int, "title": str, "description": str, "stars": int}


class JsonEventSerializer(MessageSerializer[StarAddedEvent]):
    """JSON serialiser/deserialiser for star events."""

    def serialize(self, payload: StarAddedEvent) -> bytes:
        return json.dumps(payload.to_wire(), ensure_ascii=False).encode("utf-8")

    def deserialize(self, data: bytes) -> StarAddedEvent:
        try:
            parsed: Any = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError(
                f"Payload is not UTF-8 JSON: {exc}", payload_type="StarAddedEvent", cause=exc
            ) from exc
        if not isinstance(parsed, dict):
            raise SerializationError(
                f"Expected a JSON object, got {type(parsed).__name__}",
                payload_type="StarAddedEvent",
            )
        for name, expected in _FIELDS.items():
            value = parsed.get(name)
            # bool is a subclass of int; reject it explicitly
            if not isinstance(value, expected) or isinstance(value, bool):
                raise SerializationError(
                    f"Field '{name}' must be {expected.__name__}, got {value!r}",
                    payload_type="StarAddedEvent",
                )
        return StarAddedEvent(
            id=parsed["id"],
            title=parsed["title"],
            description=parsed["description"],
            star_count=parsed["stars"],
        )


__all__ = ["JsonEventSerializer"]
