"""
Chirper: async data access for users, posts, retweets, likes and feeds.
"""

__version__ = "0.1.0"
