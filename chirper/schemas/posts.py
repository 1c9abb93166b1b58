"""
Post, retweet and like Pydantic schemas.
"""

from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from chirper.schemas.base import BaseSchema, IdentifierMixin, TimestampMixin, ensure_utc
from chirper.schemas.users import UserPublic


class PostRecord(BaseSchema, IdentifierMixin, TimestampMixin):
    """A post row as stored."""

    content: str = Field(..., description="Post body")
    user_id: int = Field(..., ge=1, description="ID of the author")


class PostWithUser(PostRecord):
    """A post joined with its author's public profile."""

    user: UserPublic


class RetweetRecord(BaseSchema, IdentifierMixin, TimestampMixin):
    """A retweet row: user_id retweeted post_id at created_at."""

    user_id: int = Field(..., ge=1)
    post_id: int = Field(..., ge=1)


class LikeRecord(BaseSchema, IdentifierMixin, TimestampMixin):
    """A like row."""

    user_id: int = Field(..., ge=1)
    post_id: int = Field(..., ge=1)


class RetweetedPost(BaseSchema):
    """A retweet as seen from the retweeting user: when, and which post."""

    created_at: datetime
    post: PostWithUser

    @field_validator('created_at')
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class LikedPost(BaseSchema):
    """A like as seen from the liking user."""

    post: PostWithUser


class UserWithPosts(UserPublic):
    """A user with their own posts, newest first."""

    posts: List[PostWithUser] = Field(default_factory=list)


class UserWithRetweets(UserPublic):
    """A user with their retweets, most recent retweet first."""

    retweets: List[RetweetedPost] = Field(default_factory=list)


class UserWithLikes(UserPublic):
    """A user with the posts they liked, newest post first."""

    likes: List[LikedPost] = Field(default_factory=list)
