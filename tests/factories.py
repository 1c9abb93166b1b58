"""
Test data factories.

Factories build ORM instances (not yet added to a session) with realistic
data. Pass explicit ``created_at`` values when a test depends on ordering.
"""

from datetime import datetime, timedelta, timezone

import factory

from chirper.database.models import Like, Post, Retweet, User
from chirper.schemas.users import UserCreate

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds: int) -> datetime:
    """A fixed timestamp ``seconds`` after BASE_TIME."""
    return BASE_TIME + timedelta(seconds=seconds)


class UserFactory(factory.Factory):
    """Factory for User rows."""

    class Meta:
        model = User

    name = factory.Faker('name')
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = factory.Faker('sha256')
    image_name = "/image/users/default_user.jpg"


class PostFactory(factory.Factory):
    """
    Factory for Post rows.

    Requires ``user``; the foreign key is filled from the relationship.
    """

    class Meta:
        model = Post

    content = factory.Faker('sentence', nb_words=8)


class RetweetFactory(factory.Factory):
    """Factory for Retweet rows. Requires ``user`` and ``post``."""

    class Meta:
        model = Retweet


class LikeFactory(factory.Factory):
    """Factory for Like rows. Requires ``user`` and ``post``."""

    class Meta:
        model = Like


class UserCreateFactory(factory.Factory):
    """Factory for user registration input."""

    class Meta:
        model = UserCreate

    name = factory.Faker('name')
    email = factory.Sequence(lambda n: f"newuser{n}@example.com")
    password = factory.Faker('sha256')


async def persist(session, *instances):
    """Add rows and flush them; the test's transaction stays open."""
    session.add_all(instances)
    await session.flush()
    return instances[0] if len(instances) == 1 else instances
