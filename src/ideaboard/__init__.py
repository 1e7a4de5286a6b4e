"""
ideaboard backend
GraphQL API for users, boards, suggestions and a books catalog
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
