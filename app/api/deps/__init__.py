"""API dependencies - re-exports from submodules."""

from .auth import (
    CurrentUser,
    DbSession,
    decode_token,
    get_current_user,
    get_db_with_rls,
    get_jwks,
    get_signing_key,
    security,
    verify_token,
)

__all__ = [
    "security",
    "get_jwks",
    "get_signing_key",
    "decode_token",
    "verify_token",
    "get_current_user",
    "get_db_with_rls",
    "DbSession",
    "CurrentUser",
]
