"""
Record and input schemas returned to and accepted from callers.
"""

from .base import BaseSchema
from .users import UserPublic, UserRecord, UserCreate, UserProfileUpdate
from .posts import (
    PostRecord,
    PostWithUser,
    RetweetRecord,
    LikeRecord,
    RetweetedPost,
    LikedPost,
    UserWithPosts,
    UserWithRetweets,
    UserWithLikes,
)
from .feed import FeedItem

__all__ = [
    "BaseSchema",
    "UserPublic",
    "UserRecord",
    "UserCreate",
    "UserProfileUpdate",
    "PostRecord",
    "PostWithUser",
    "RetweetRecord",
    "LikeRecord",
    "RetweetedPost",
    "LikedPost",
    "UserWithPosts",
    "UserWithRetweets",
    "UserWithLikes",
    "FeedItem",
]
