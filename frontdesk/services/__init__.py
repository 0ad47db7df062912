"""Services - Cross-domain infrastructure"""

from .change_feed import ChangeEvent, ChangeFeed, RedisChangeFeed, SQLAlchemyChangeFeed

__all__ = ["ChangeEvent", "ChangeFeed", "RedisChangeFeed", "SQLAlchemyChangeFeed"]
