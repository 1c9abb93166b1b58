"""
Feed item schema.

A feed item is a post shown in a timeline, either because it was written
(``is_retweeted_post`` false) or because somebody retweeted it. For
retweets ``created_at`` holds the retweet time, which is what feeds sort on.
"""

from datetime import datetime

from pydantic import Field, model_validator

from chirper.schemas.posts import PostWithUser


class FeedItem(PostWithUser):
    """A post enriched with retweet context."""

    is_retweeted_post: bool = Field(default=False)
    retweet_user_name: str = Field(
        default="",
        description="Display name of the retweeting user; empty for original posts"
    )

    @model_validator(mode='after')
    def check_retweet_context(self) -> "FeedItem":
        if not self.is_retweeted_post and self.retweet_user_name:
            raise ValueError("retweet_user_name is only set on retweeted posts")
        return self

    @classmethod
    def from_post(cls, post: PostWithUser) -> "FeedItem":
        """Wrap a post its author wrote."""
        return cls(**post.model_dump())

    @classmethod
    def from_retweet(
        cls,
        post: PostWithUser,
        retweeted_at: datetime,
        retweet_user_name: str,
    ) -> "FeedItem":
        """Wrap a retweeted post, stamped with the retweet time."""
        return cls(
            **post.model_dump(exclude={"created_at"}),
            created_at=retweeted_at,
            is_retweeted_post=True,
            retweet_user_name=retweet_user_name,
        )
