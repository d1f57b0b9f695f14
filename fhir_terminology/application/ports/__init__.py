"""Port interfaces for external dependencies.

This module defines abstract interfaces (protocols) that host adapters
must implement. This enables dependency injection and testing.
"""

from .repositories import ResourceResolverPort
from .services import LoggerPort

__all__ = [
    "LoggerPort",
    "ResourceResolverPort",
]
