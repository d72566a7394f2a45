"""
Data access.

Posts are read from the Bridgehead REST API.
"""

from bridgehead.database.posts_client import PostsClient

__all__ = [
    "PostsClient",
]
