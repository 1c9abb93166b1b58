"""
Repository pattern implementation for data access.

Every repository wraps one ``AsyncSession`` supplied by the caller. Writes
are flushed, never committed: the caller owns the transaction. Database
errors (``IntegrityError`` for constraint violations, ``NoResultFound``
for writes against missing rows) propagate unchanged. A failed write is
rolled back to a SAVEPOINT taken just before it, so the rest of the
caller's transaction survives.
"""

import logging
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chirper.config.settings import settings
from chirper.schemas.feed import FeedItem
from chirper.schemas.posts import (
    LikedPost,
    LikeRecord,
    PostRecord,
    PostWithUser,
    RetweetedPost,
    RetweetRecord,
    UserWithLikes,
    UserWithPosts,
    UserWithRetweets,
)
from chirper.schemas.users import UserProfileUpdate, UserPublic, UserRecord

from .base import Base
from .feed import merge_feed, tag_retweeted_post
from .models import Like, Post, Retweet, User

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Base)

# Eager-load a post's author alongside the post
_POST_WITH_USER = selectinload(Post.user)


class BaseRepository(Generic[T]):
    """
    Base repository class.

    Provides the shared insert/update/delete mechanics and lookups.
    """

    def __init__(self, session: AsyncSession, model_class: Type[T]):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
            model_class: Model class for this repository
        """
        self.session = session
        self.model_class = model_class

    async def _add(self, **kwargs: Any) -> T:
        """
        Insert a new row.

        The insert runs in a SAVEPOINT, so a failure leaves earlier work in
        the caller's transaction intact.

        Raises:
            IntegrityError: If the row violates a unique or foreign key constraint
        """
        instance = self.model_class(**kwargs)
        try:
            async with self.session.begin_nested():
                self.session.add(instance)
        except IntegrityError as e:
            logger.warning(
                f"Failed to create {self.model_class.__name__}: {e.orig}",
                extra={
                    "event_type": "record_create_failed",
                    "model": self.model_class.__name__,
                }
            )
            raise

        await self.session.refresh(instance)

        logger.info(
            f"Created {self.model_class.__name__} with ID: {instance.id}",
            extra={
                "event_type": "record_created",
                "model": self.model_class.__name__,
                "record_id": instance.id,
            }
        )

        return instance

    async def _update(self, instance: T, **changes: Any) -> T:
        """
        Apply column changes to a loaded row inside a SAVEPOINT.

        Raises:
            IntegrityError: If the change violates a constraint
        """
        # a rolled-back savepoint expires the instance
        record_id = instance.id
        try:
            async with self.session.begin_nested():
                for key, value in changes.items():
                    setattr(instance, key, value)
        except IntegrityError as e:
            logger.warning(
                f"Failed to update {self.model_class.__name__} with ID {record_id}: {e.orig}",
                extra={
                    "event_type": "record_update_failed",
                    "model": self.model_class.__name__,
                    "record_id": record_id,
                }
            )
            raise

        await self.session.refresh(instance)

        logger.info(
            f"Updated {self.model_class.__name__} with ID: {record_id}",
            extra={
                "event_type": "record_updated",
                "model": self.model_class.__name__,
                "record_id": record_id,
                "updated_fields": list(changes.keys()),
            }
        )

        return instance

    async def _delete(self, instance: T) -> None:
        """Delete a loaded row."""
        record_id = instance.id
        await self.session.delete(instance)
        await self.session.flush()

        logger.info(
            f"Deleted {self.model_class.__name__} with ID: {record_id}",
            extra={
                "event_type": "record_deleted",
                "model": self.model_class.__name__,
                "record_id": record_id,
            }
        )

    async def _one(self, statement: Select) -> T:
        """
        Run a query expected to match exactly one row.

        Raises:
            NoResultFound: If nothing matches
        """
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def _one_or_none(self, statement: Select) -> Optional[T]:
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def _all(self, statement: Select) -> List[T]:
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_id(self, record_id: int) -> Optional[T]:
        """
        Get record by ID.

        Args:
            record_id: Record ID

        Returns:
            Model instance or None if not found
        """
        return await self._one_or_none(
            select(self.model_class).where(self.model_class.id == record_id)
        )

    async def count(self) -> int:
        """Count total number of records."""
        result = await self.session.execute(
            select(func.count(self.model_class.id))
        )
        return result.scalar() or 0


class PostRepository(BaseRepository[Post]):
    """Posts and the global feed."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Post)

    async def create_post(self, content: str, user_id: int) -> PostRecord:
        """
        Create a post.

        Raises:
            IntegrityError: If user_id does not reference an existing user
        """
        post = await self._add(content=content, user_id=user_id)
        return PostRecord.model_validate(post)

    async def update_post(self, post_id: int, content: str) -> PostRecord:
        """
        Replace a post's content.

        Raises:
            NoResultFound: If the post does not exist
        """
        post = await self._one(select(Post).where(Post.id == post_id))
        post = await self._update(post, content=content)
        return PostRecord.model_validate(post)

    async def delete_post(self, post_id: int) -> PostRecord:
        """
        Delete a post together with its retweets and likes.

        Returns:
            The post as it was before deletion

        Raises:
            NoResultFound: If the post does not exist
        """
        post = await self._one(select(Post).where(Post.id == post_id))
        record = PostRecord.model_validate(post)
        await self._delete(post)
        return record

    async def get_post(self, post_id: int) -> Optional[PostWithUser]:
        """Get a post with its author's public profile, or None."""
        post = await self._one_or_none(
            select(Post).options(_POST_WITH_USER).where(Post.id == post_id)
        )
        if post is None:
            return None
        return PostWithUser.model_validate(post)

    async def get_all_posts(self) -> List[PostWithUser]:
        """All posts with their authors, newest first."""
        posts = await self._all(
            select(Post).options(_POST_WITH_USER).order_by(Post.created_at.desc())
        )
        return [PostWithUser.model_validate(post) for post in posts]

    async def get_all_retweeted_posts(self) -> List[FeedItem]:
        """
        Every retweet as a feed item.

        Each item is the retweeted post (with its author) stamped with the
        retweet time and the retweeting user's name, newest retweet first.
        """
        result = await self.session.execute(
            select(Retweet)
            .options(
                selectinload(Retweet.user),
                selectinload(Retweet.post).selectinload(Post.user),
            )
            .order_by(Retweet.created_at.desc())
        )
        return [
            tag_retweeted_post(
                PostWithUser.model_validate(retweet.post),
                retweeted_at=retweet.created_at,
                retweet_user_name=retweet.user.name,
            )
            for retweet in result.scalars().all()
        ]

    async def get_all_posts_and_retweeted_posts(self) -> List[FeedItem]:
        """The global feed: all posts and all retweets, newest first."""
        posts = await self.get_all_posts()
        retweeted_posts = await self.get_all_retweeted_posts()
        return merge_feed(posts, retweeted_posts)


class UserRepository(BaseRepository[User]):
    """Users, their profiles, and per-user post/retweet/like views."""

    def __init__(self, session: AsyncSession, default_image_name: Optional[str] = None):
        super().__init__(session, User)
        self.default_image_name = default_image_name or settings.default_user_image

    async def create_user(self, name: str, email: str, password: str) -> UserRecord:
        """
        Register a user with the default profile image.

        ``password`` is stored as given; hash it before calling.

        Raises:
            IntegrityError: If the email is already registered
        """
        user = await self._add(
            name=name,
            email=email,
            password=password,
            image_name=self.default_image_name,
        )
        return UserRecord.model_validate(user)

    async def update_user_profile(
        self,
        user_id: int,
        profile: Union[UserProfileUpdate, Mapping[str, Any]],
    ) -> UserRecord:
        """
        Update name, email and/or image_name; omitted fields are unchanged.

        Raises:
            NoResultFound: If the user does not exist
            IntegrityError: If the new email belongs to another user
        """
        if not isinstance(profile, UserProfileUpdate):
            profile = UserProfileUpdate.model_validate(profile)

        user = await self._one(select(User).where(User.id == user_id))
        user = await self._update(user, **profile.changes())
        return UserRecord.model_validate(user)

    async def get_user(self, user_id: int) -> Optional[UserPublic]:
        user = await self.get_by_id(user_id)
        return UserPublic.model_validate(user) if user is not None else None

    async def get_user_by_email(self, email: str) -> Optional[UserPublic]:
        user = await self._one_or_none(select(User).where(User.email == email))
        return UserPublic.model_validate(user) if user is not None else None

    async def get_user_by_email_with_password(self, email: str) -> Optional[UserRecord]:
        """
        Look up a user including the password hash.

        This is the only read path exposing the hash; use it for
        credential checks only.
        """
        user = await self._one_or_none(select(User).where(User.email == email))
        return UserRecord.model_validate(user) if user is not None else None

    async def get_all_users(self) -> List[UserPublic]:
        """All users, newest first."""
        users = await self._all(select(User).order_by(User.created_at.desc()))
        return [UserPublic.model_validate(user) for user in users]

    async def get_user_with_posts(self, user_id: int) -> Optional[UserWithPosts]:
        """A user with their posts, newest first."""
        user = await self.get_user(user_id)
        if user is None:
            return None

        posts = await self._all(
            select(Post)
            .options(_POST_WITH_USER)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc())
        )
        return UserWithPosts(
            **user.model_dump(),
            posts=[PostWithUser.model_validate(post) for post in posts],
        )

    async def get_user_retweeted_posts(self, user_id: int) -> Optional[UserWithRetweets]:
        """A user with their retweets, most recent retweet first."""
        user = await self.get_user(user_id)
        if user is None:
            return None

        result = await self.session.execute(
            select(Retweet)
            .options(selectinload(Retweet.post).selectinload(Post.user))
            .where(Retweet.user_id == user_id)
            .order_by(Retweet.created_at.desc())
        )
        return UserWithRetweets(
            **user.model_dump(),
            retweets=[
                RetweetedPost(
                    created_at=retweet.created_at,
                    post=PostWithUser.model_validate(retweet.post),
                )
                for retweet in result.scalars().all()
            ],
        )

    async def get_user_liked_posts(self, user_id: int) -> Optional[UserWithLikes]:
        """A user with the posts they liked, ordered by post creation time, newest first."""
        user = await self.get_user(user_id)
        if user is None:
            return None

        result = await self.session.execute(
            select(Like)
            .join(Like.post)
            .options(selectinload(Like.post).selectinload(Post.user))
            .where(Like.user_id == user_id)
            .order_by(Post.created_at.desc())
        )
        return UserWithLikes(
            **user.model_dump(),
            likes=[
                LikedPost(post=PostWithUser.model_validate(like.post))
                for like in result.scalars().all()
            ],
        )

    async def get_user_with_posts_and_retweeted_posts(self, user_id: int) -> List[FeedItem]:
        """
        A user's timeline: their own posts and their retweets, newest first.

        Retweeted entries carry the queried user's name as
        ``retweet_user_name``. Returns an empty list for an unknown user.
        """
        user = await self.get_user_with_posts(user_id)
        retweets = await self.get_user_retweeted_posts(user_id)

        posts = user.posts if user is not None else []
        retweeted_posts = []
        if retweets is not None:
            retweeted_posts = [
                tag_retweeted_post(
                    retweet.post,
                    retweeted_at=retweet.created_at,
                    retweet_user_name=retweets.name,
                )
                for retweet in retweets.retweets
            ]

        return merge_feed(posts, retweeted_posts)


class PostReactionRepository(BaseRepository[T]):
    """
    Shared queries for user-to-post join rows (retweets, likes).

    Pairs are unique: a user can retweet or like a given post once.
    """

    async def _exists(self, user_id: int, post_id: int) -> bool:
        return await self._one_or_none(self._pair(user_id, post_id)) is not None

    async def _count_for_post(self, post_id: int) -> int:
        result = await self.session.execute(
            select(func.count(self.model_class.id)).where(self.model_class.post_id == post_id)
        )
        return result.scalar() or 0

    def _pair(self, user_id: int, post_id: int) -> Select:
        return select(self.model_class).where(
            self.model_class.user_id == user_id,
            self.model_class.post_id == post_id,
        )


class RetweetRepository(PostReactionRepository[Retweet]):
    """Retweet writes and counts."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Retweet)

    async def create_retweet(self, user_id: int, post_id: int) -> RetweetRecord:
        """
        Record that user_id retweeted post_id now.

        Raises:
            IntegrityError: If the user or post is missing, or the pair already exists
        """
        return RetweetRecord.model_validate(await self._add(user_id=user_id, post_id=post_id))

    async def delete_retweet(self, user_id: int, post_id: int) -> RetweetRecord:
        """
        Undo a retweet.

        Raises:
            NoResultFound: If the user has not retweeted the post
        """
        retweet = await self._one(self._pair(user_id, post_id))
        record = RetweetRecord.model_validate(retweet)
        await self._delete(retweet)
        return record

    async def has_retweeted(self, user_id: int, post_id: int) -> bool:
        return await self._exists(user_id, post_id)

    async def count_retweets(self, post_id: int) -> int:
        return await self._count_for_post(post_id)


class LikeRepository(PostReactionRepository[Like]):
    """Like writes and counts."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Like)

    async def create_like(self, user_id: int, post_id: int) -> LikeRecord:
        """
        Record that user_id liked post_id.

        Raises:
            IntegrityError: If the user or post is missing, or the pair already exists
        """
        return LikeRecord.model_validate(await self._add(user_id=user_id, post_id=post_id))

    async def delete_like(self, user_id: int, post_id: int) -> LikeRecord:
        """
        Undo a like.

        Raises:
            NoResultFound: If the user has not liked the post
        """
        like = await self._one(self._pair(user_id, post_id))
        record = LikeRecord.model_validate(like)
        await self._delete(like)
        return record

    async def has_liked(self, user_id: int, post_id: int) -> bool:
        return await self._exists(user_id, post_id)

    async def count_likes(self, post_id: int) -> int:
        return await self._count_for_post(post_id)


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    All repositories it hands out share the one session, so work done
    through several of them commits or rolls back together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def users(self) -> UserRepository:
        """Get user repository instance."""
        return UserRepository(self.session)

    @property
    def posts(self) -> PostRepository:
        """Get post repository instance."""
        return PostRepository(self.session)

    @property
    def retweets(self) -> RetweetRepository:
        """Get retweet repository instance."""
        return RetweetRepository(self.session)

    @property
    def likes(self) -> LikeRepository:
        """Get like repository instance."""
        return LikeRepository(self.session)
