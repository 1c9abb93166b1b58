"""
Feed assembly: merge posts and retweeted posts into one timeline.

Both the global feed and a single user's feed are built the same way:
original posts are tagged ``is_retweeted_post=False``, retweeted posts
carry the retweet time as ``created_at``, and the union is sorted newest
first. Order between items with equal timestamps is unspecified.
"""

from datetime import datetime
from operator import attrgetter
from typing import Iterable, List

from chirper.schemas.feed import FeedItem
from chirper.schemas.posts import PostWithUser
from chirper.utils.logging import get_logger

logger = get_logger(__name__)

_effective_created_at = attrgetter("created_at")


def tag_own_posts(posts: Iterable[PostWithUser]) -> List[FeedItem]:
    """Wrap posts shown because their author wrote them."""
    return [FeedItem.from_post(post) for post in posts]


def tag_retweeted_post(
    post: PostWithUser,
    retweeted_at: datetime,
    retweet_user_name: str,
) -> FeedItem:
    """Wrap a post shown because ``retweet_user_name`` retweeted it at ``retweeted_at``."""
    return FeedItem.from_retweet(post, retweeted_at, retweet_user_name)


def sort_feed(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Sort feed items by effective creation time, newest first."""
    return sorted(items, key=_effective_created_at, reverse=True)


def merge_feed(
    posts: Iterable[PostWithUser],
    retweeted_posts: Iterable[FeedItem],
) -> List[FeedItem]:
    """
    Merge original posts with retweeted posts into a single feed.

    Args:
        posts: Posts to show as written by their authors
        retweeted_posts: Items already tagged with tag_retweeted_post

    Returns:
        All items, newest effective created_at first
    """
    own = tag_own_posts(posts)
    retweeted = list(retweeted_posts)
    feed = sort_feed([*own, *retweeted])

    logger.debug(
        "Feed merged",
        event_type="feed_merged",
        posts=len(own),
        retweeted_posts=len(retweeted),
    )

    return feed
