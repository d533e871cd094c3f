"""Shared helpers for Bloques."""

from bloques.utils.logger import get_logger

__all__ = ["get_logger"]
