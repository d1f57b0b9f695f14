"""Caching infrastructure.

In-process caching of parsed code systems and value sets.
"""

from .memory_cache import CacheEntry, MemoryCache

__all__ = [
    "CacheEntry",
    "MemoryCache",
]
