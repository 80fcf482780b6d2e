"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, resource_path
from .inmemory import ResponseCache

__all__ = [
    "CacheEntry",
    "ResponseCache",
    "resource_path",
]
