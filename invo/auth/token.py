"""Claim decoding for the signed access tokens issued by the INVO API.

Signatures are never verified here: the token comes straight from the API
over TLS and the SDK only needs its expiry and identity claims.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import MalformedTokenError


@dataclass(frozen=True)
class DecodedToken:
    """Claims read from a token payload."""

    expires_at: float
    subject: str | None = None
    email: str | None = None
    issued_at: float | None = None
    claims: dict[str, Any] = field(default_factory=dict)


def _b64url_decode(segment: str) -> bytes:
    padding = -len(segment) % 4
    return base64.urlsafe_b64decode(segment + "=" * padding)


def decode_token(token: str) -> DecodedToken:
    """Decode the claim payload of a ``header.payload.signature`` token.

    Raises:
        MalformedTokenError: If the payload segment is missing, is not valid
            base64url, is not a JSON object, or has no numeric ``exp`` claim.
    """
    if not isinstance(token, str):
        raise MalformedTokenError("Invalid token format")
    segments = token.split(".")
    if len(segments) < 2 or not segments[1]:
        raise MalformedTokenError("Invalid token format")

    try:
        payload = json.loads(_b64url_decode(segments[1]).decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError("Failed to decode token") from e

    if not isinstance(payload, dict):
        raise MalformedTokenError("Failed to decode token")

    exp = payload.get("exp")
    # bool is an int subclass but never a valid timestamp
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise MalformedTokenError("Token has no numeric exp claim")

    iat = payload.get("iat")
    return DecodedToken(
        expires_at=exp,
        subject=payload.get("sub"),
        email=payload.get("email"),
        issued_at=iat if isinstance(iat, (int, float)) and not isinstance(iat, bool) else None,
        claims=payload,
    )


def is_token_expired(token: str, skew_seconds: int = 0) -> bool:
    """Return True if the token expires within ``skew_seconds`` or cannot be decoded."""
    try:
        decoded = decode_token(token)
    except MalformedTokenError:
        return True
    return decoded.expires_at < int(time.time()) + skew_seconds


def seconds_until_expiry(token: str) -> int:
    """Seconds left before the token expires, or 0 if it is expired or undecodable."""
    try:
        decoded = decode_token(token)
    except MalformedTokenError:
        return 0
    return max(0, int(decoded.expires_at - int(time.time())))
