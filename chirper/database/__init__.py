"""
Database module for SQLAlchemy ORM integration.

This module provides engine/session management, models, repositories and
feed assembly for the application's data layer.
"""

from .config import (
    create_engine,
    create_session_factory,
    create_tables,
    drop_tables,
    dispose_engine,
    session_scope,
    check_database_health,
    get_database_info,
)
from .base import Base
from .models import User, Post, Retweet, Like
from .feed import merge_feed, sort_feed, tag_own_posts, tag_retweeted_post
from .repositories import (
    BaseRepository,
    PostRepository,
    UserRepository,
    RetweetRepository,
    LikeRepository,
    RepositoryFactory,
)

__all__ = [
    # Database configuration
    "create_engine",
    "create_session_factory",
    "create_tables",
    "drop_tables",
    "dispose_engine",
    "session_scope",
    "check_database_health",
    "get_database_info",

    # Base model
    "Base",

    # Models
    "User",
    "Post",
    "Retweet",
    "Like",

    # Feed
    "merge_feed",
    "sort_feed",
    "tag_own_posts",
    "tag_retweeted_post",

    # Repositories
    "BaseRepository",
    "PostRepository",
    "UserRepository",
    "RetweetRepository",
    "LikeRepository",
    "RepositoryFactory",
]
