"""Persistence helpers."""

from .db_helpers import DatabaseHelper

__all__ = [
    'DatabaseHelper',
]
