"""Utility modules for the BitSwarp pipeline.

Sub-modules:
- logging: configure_logging() for structlog setup
- amounts: decimal <-> base-unit conversion (import directly from src.utils.amounts)
"""

from .logging import configure_logging

__all__ = [
    "configure_logging",
]
