"""
Utilities package for the buy/sell record layer.

Exports shared helpers for logging and other cross-cutting concerns.
"""

from buysell.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
