"""
Tests for record schemas.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from chirper.schemas import (
    FeedItem,
    PostRecord,
    PostWithUser,
    UserCreate,
    UserProfileUpdate,
    UserPublic,
    UserRecord,
)

NOW = datetime(2024, 5, 4, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def user_row():
    """Stand-in for a User ORM instance."""
    return SimpleNamespace(
        id=3,
        name="Carol",
        email="carol@example.com",
        password="pbkdf2$secret",
        image_name="/image/users/default_user.jpg",
        created_at=NOW.replace(tzinfo=None),
        updated_at=NOW.replace(tzinfo=None),
    )


class TestUserSchemas:

    def test_public_user_drops_password(self, user_row):
        user = UserPublic.model_validate(user_row)

        assert user.id == 3
        assert "password" not in user.model_dump()
        assert not hasattr(user, "password")

    def test_naive_timestamps_become_utc(self, user_row):
        user = UserPublic.model_validate(user_row)

        assert user.created_at == NOW
        assert user.created_at.tzinfo is not None

    def test_record_hides_password_from_repr(self, user_row):
        user = UserRecord.model_validate(user_row)

        assert user.password == "pbkdf2$secret"
        assert "pbkdf2$secret" not in repr(user)

    def test_camel_case_serialization(self, user_row):
        dumped = UserPublic.model_validate(user_row).model_dump(by_alias=True)

        assert set(dumped) == {"id", "name", "email", "imageName", "createdAt", "updatedAt"}

    def test_user_create_requires_valid_email(self):
        with pytest.raises(ValidationError):
            UserCreate(name="Eve", email="not-an-email", password="hash")

    def test_profile_update_reports_only_provided_fields(self):
        assert UserProfileUpdate(name="X").changes() == {"name": "X"}
        assert UserProfileUpdate.model_validate({"imageName": "/x.png"}).changes() == {"image_name": "/x.png"}
        assert UserProfileUpdate().changes() == {}

    def test_profile_update_can_clear_image(self):
        assert UserProfileUpdate.model_validate({"imageName": None}).changes() == {"image_name": None}

    @pytest.mark.parametrize("field", ["name", "email"])
    def test_profile_update_rejects_null_required_columns(self, field):
        with pytest.raises(ValidationError):
            UserProfileUpdate.model_validate({field: None})

    def test_profile_update_strips_whitespace(self):
        assert UserProfileUpdate(name="  Ann  ").changes() == {"name": "Ann"}

    def test_records_keep_whitespace(self, user_row):
        user_row.password = " hash with spaces "

        assert UserRecord.model_validate(user_row).password == " hash with spaces "
        assert PostRecord(
            id=1,
            content="  indented\n",
            user_id=3,
            created_at=NOW,
            updated_at=NOW,
        ).content == "  indented\n"

    def test_profile_update_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            UserProfileUpdate.model_validate({"password": "sneaky"})


class TestFeedItem:

    @pytest.fixture
    def post(self, user_row):
        return PostWithUser(
            id=10,
            content="hello",
            user_id=3,
            created_at=NOW,
            updated_at=NOW,
            user=UserPublic.model_validate(user_row),
        )

    def test_from_post_defaults(self, post):
        item = FeedItem.from_post(post)

        assert item.is_retweeted_post is False
        assert item.retweet_user_name == ""

    def test_retweet_name_requires_retweet_flag(self, post):
        with pytest.raises(ValidationError):
            FeedItem(**post.model_dump(), retweet_user_name="Mallory")

    def test_feed_item_serializes_with_camel_case_flags(self, post):
        dumped = FeedItem.from_post(post).model_dump(by_alias=True)

        assert dumped["isRetweetedPost"] is False
        assert dumped["retweetUserName"] == ""
        assert dumped["userId"] == 3
        assert "password" not in dumped["user"]
