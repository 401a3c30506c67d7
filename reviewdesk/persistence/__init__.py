"""Persistence backends that accept a bulk write of submitted reviews."""

from reviewdesk.persistence.mongo import MongoReviewStore
from reviewdesk.persistence.sqlite import SqliteReviewStore

__all__ = ["MongoReviewStore", "SqliteReviewStore"]
