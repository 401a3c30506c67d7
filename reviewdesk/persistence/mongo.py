"""MongoDB review store: bulk inserts submitted reviews into one collection.

The collection is assumed to exist; no index or schema setup happens here.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import (
    BulkWriteError,
    ConfigurationError,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
)

from reviewdesk.errors import BackendUnavailableError, WriteFailedError
from reviewdesk.models import Review

logger = logging.getLogger(__name__)

# Unauthorized / AuthenticationFailed
_AUTH_ERROR_CODES = {13, 18}


def _bulk_error_message(exc: BulkWriteError) -> str:
    """First server-side write error message, e.g. ``E11000 duplicate key ...``."""
    write_errors = (exc.details or {}).get("writeErrors") or []
    if write_errors and write_errors[0].get("errmsg"):
        return str(write_errors[0]["errmsg"])
    return str(exc)


class MongoReviewStore:
    """Async MongoDB writer for review snapshots.

    The client is created on first write so a bad connection string surfaces
    as a submission error instead of a startup crash.
    """

    name = "mongodb"

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.uri = uri
        self.database = database
        self.collection = collection
        self.timeout_seconds = timeout_seconds
        self._client: AsyncMongoClient | None = None

    def _get_client(self) -> AsyncMongoClient:
        if self._client is None:
            timeout_ms = int(self.timeout_seconds * 1000)
            self._client = AsyncMongoClient(
                self.uri,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
            )
        return self._client

    async def insert_many(self, reviews: Sequence[Review]) -> None:
        """Insert all reviews in one ``insert_many`` call."""
        # MongoDB rejects an empty bulk insert
        if not reviews:
            logger.info("No reviews to insert into %s.%s", self.database, self.collection)
            return

        documents: list[dict[str, Any]] = [review.model_dump() for review in reviews]
        try:
            client = self._get_client()
            await client[self.database][self.collection].insert_many(documents)
        except (ConnectionFailure, ConfigurationError) as e:
            logger.warning("MongoDB unavailable: %s", e)
            raise BackendUnavailableError(f"Persistence backend unavailable: {e}") from e
        except BulkWriteError as e:
            message = _bulk_error_message(e)
            logger.warning("MongoDB bulk write failed: %s", message)
            raise WriteFailedError(message) from e
        except OperationFailure as e:
            if e.code in _AUTH_ERROR_CODES:
                logger.warning("MongoDB authentication failed: %s", e)
                raise BackendUnavailableError(
                    f"Persistence backend unavailable: {e}"
                ) from e
            logger.warning("MongoDB write failed: %s", e)
            raise WriteFailedError(str(e)) from e
        except PyMongoError as e:
            logger.warning("MongoDB write failed: %s", e)
            raise WriteFailedError(str(e)) from e

        logger.info(
            "Inserted %d reviews into %s.%s", len(documents), self.database, self.collection
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
