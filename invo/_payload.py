"""Payload coercion for request bodies."""

from __future__ import annotations

from typing import Any, Mapping

_ERROR_MSG = "payload must be a mapping, a Pydantic BaseModel instance, or a dataclass instance"


def resolve_payload(payload: object) -> dict[str, Any]:
    """Convert a request payload to a JSON-ready dict.

    Accepts:
        - Mapping -> copied into a plain dict
        - Pydantic v2 model instance (``model_dump``)
        - Pydantic v1 model instance (``dict``)
        - dataclass instance

    ``None`` values produced by model dumping are dropped so optional fields
    are omitted rather than sent as null.

    Raises:
        TypeError: If the value is not a supported type or the dump method
            returns a non-dict.
    """
    if isinstance(payload, Mapping):
        return dict(payload)

    if isinstance(payload, type):
        raise TypeError(_ERROR_MSG)

    # Pydantic v2: model_dump (check before v1 to avoid deprecation warnings)
    v2_method = getattr(payload, "model_dump", None)
    if v2_method is not None and callable(v2_method):
        result = v2_method(by_alias=True, exclude_none=True)
        if not isinstance(result, dict):
            raise TypeError(f"model_dump() returned {type(result).__name__}, expected dict")
        return result

    # Pydantic v1: dict
    v1_method = getattr(payload, "dict", None)
    if v1_method is not None and callable(v1_method):
        result = v1_method(by_alias=True, exclude_none=True)
        if not isinstance(result, dict):
            raise TypeError(f"dict() returned {type(result).__name__}, expected dict")
        return result

    from dataclasses import asdict, is_dataclass

    if is_dataclass(payload):
        return {k: v for k, v in asdict(payload).items() if v is not None}

    raise TypeError(_ERROR_MSG)
