"""Security utilities."""

from src.boardsync.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    user_id_from_token,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_token",
    "user_id_from_token",
]
