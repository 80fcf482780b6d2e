"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

econ_trader: API client core for the econ-trader dashboard backend.
"""

from .api import ApiError, ApiSettings, BaseApiClient, GetOptions

__all__ = ["ApiError", "ApiSettings", "BaseApiClient", "GetOptions"]

__version__ = "0.1.0"
