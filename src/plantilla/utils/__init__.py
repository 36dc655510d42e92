"""Shared helpers for Plantilla modules."""

from plantilla.utils.logger import get_logger

__all__ = ["get_logger"]
