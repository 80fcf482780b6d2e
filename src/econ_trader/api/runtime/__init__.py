"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .coalescing import RequestCoalescer
from .pacing import hold_until_elapsed
from .timeouts import await_with_timeout

__all__ = [
    "RequestCoalescer",
    "await_with_timeout",
    "hold_until_elapsed",
]
