"""Utilities package."""

from .auth import create_access_token, get_current_actor, get_optional_actor, verify_token

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_actor",
    "get_optional_actor",
]
