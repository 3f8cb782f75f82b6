"""
Utilities package for the records demo.

Exports shared helpers for cross-cutting concerns such as logging.
Keep this package lightweight and free of domain-specific logic.
"""

from records_demo.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
