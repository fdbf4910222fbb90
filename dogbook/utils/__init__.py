# dogbook/utils/__init__.py
"""Helpers shared across the backend and the client."""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
