"""Host Server Async Client Package."""

from .connection import AsyncHostConnection

__all__ = ['AsyncHostConnection']
