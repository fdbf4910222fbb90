# dogbook/client/__init__.py
"""Python client for the Dogbook API."""

from .session import ApiSession
from .api_client import DogbookClient
from .like_state import LikeState, toggle_like_optimistically

__all__ = ['ApiSession', 'DogbookClient', 'LikeState', 'toggle_like_optimistically']
