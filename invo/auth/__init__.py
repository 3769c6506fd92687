"""Authentication primitives for the INVO SDK: token decoding, credentials and auth results."""

from .credentials import Credentials, CredentialStore
from .token import DecodedToken, decode_token, is_token_expired, seconds_until_expiry
from .types import LoginResponse, User

__all__ = [
    "Credentials",
    "CredentialStore",
    "DecodedToken",
    "LoginResponse",
    "User",
    "decode_token",
    "is_token_expired",
    "seconds_until_expiry",
]
