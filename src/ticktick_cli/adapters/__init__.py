"""Adapters - I/O implementations of ports."""

from .ticktick_api import AuthenticationError, TickTickAdapter, TickTickAPIError

__all__ = [
    "TickTickAdapter",
    "AuthenticationError",
    "TickTickAPIError",
]
