"""
Database models: users, posts, retweets and likes.

Users own posts, retweets and likes. Retweets and likes join a user to a
post; deleting either side removes the join rows.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class User(Base):
    """A registered account."""

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address"
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Password hash"
    )

    image_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Profile image reference"
    )

    posts: Mapped[List["Post"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    retweets: Mapped[List["Retweet"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    likes: Mapped[List["Like"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Post(Base):
    """A post written by a user."""

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Post body"
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment="ID of the user who wrote this post"
    )

    user: Mapped[User] = relationship(back_populates="posts")

    retweets: Mapped[List["Retweet"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    likes: Mapped[List["Like"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Retweet(Base):
    """A user re-sharing a post; created_at is the retweet time."""

    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', name='uq_retweet_user_post'),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment="ID of the retweeting user"
    )

    post_id: Mapped[int] = mapped_column(
        ForeignKey('post.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment="ID of the retweeted post"
    )

    user: Mapped[User] = relationship(back_populates="retweets")
    post: Mapped[Post] = relationship(back_populates="retweets")


class Like(Base):
    """A user liking a post."""

    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', name='uq_like_user_post'),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment="ID of the liking user"
    )

    post_id: Mapped[int] = mapped_column(
        ForeignKey('post.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment="ID of the liked post"
    )

    user: Mapped[User] = relationship(back_populates="likes")
    post: Mapped[Post] = relationship(back_populates="likes")
