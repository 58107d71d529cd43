"""Observability helpers."""

from .logger import observability_configure_logging

__all__ = ["observability_configure_logging"]
