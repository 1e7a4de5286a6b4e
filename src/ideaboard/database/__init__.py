"""
Database module for the ideaboard backend
"""

from .connection import get_async_session, init_database

__all__ = ["get_async_session", "init_database"]
