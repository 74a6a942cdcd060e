"""Core Rollcall utilities.

This module exports core utilities for use throughout the application.
"""

from rollcall.core.config import Settings, get_settings
from rollcall.core.logging import (
    bind_correlation_id,
    bind_principal,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "bind_principal",
    "clear_context",
]
