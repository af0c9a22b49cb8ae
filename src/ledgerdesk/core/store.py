"""Read access to document collections: counts, sums and most-recent listings."""

import re
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from functools import wraps
from typing import Any, Protocol

import structlog
from pydantic import BaseModel
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConnectionFailure, DuplicateKeyError, ExecutionTimeout

from ledgerdesk.core.db import to_decimal
from ledgerdesk.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)


class Collection(StrEnum):
    """MongoDB collections holding business documents."""

    CUSTOMERS = "customers"
    WORKSHEETS = "worksheets"
    INVOICES = "invoices"
    ORDERS = "orders"
    TICKETS = "tickets"


class DocumentQuery(BaseModel):
    """Predicate over a document collection.

    statuses: status must be one of these values (None = any status)
    exclude_statuses: status must not be one of these values
    created_before: created_at must be at or before this instant (inclusive)
    """

    statuses: frozenset[str] | None = None
    exclude_statuses: frozenset[str] = frozenset()
    created_before: datetime | None = None

    def with_created_before(self, bound: datetime) -> "DocumentQuery":
        return self.model_copy(update={"created_before": bound})


def build_mongo_query(query: DocumentQuery) -> dict[str, Any]:
    """Translate a DocumentQuery into a MongoDB filter document."""
    mongo_query: dict[str, Any] = {}

    status_condition: dict[str, Any] = {}
    if query.statuses is not None:
        if len(query.statuses) == 1:
            status_condition["$eq"] = next(iter(query.statuses))
        else:
            status_condition["$in"] = sorted(query.statuses)
    if query.exclude_statuses:
        if len(query.exclude_statuses) == 1:
            status_condition["$ne"] = next(iter(query.exclude_statuses))
        else:
            status_condition["$nin"] = sorted(query.exclude_statuses)
    if status_condition:
        mongo_query["status"] = status_condition

    if query.created_before is not None:
        mongo_query["created_at"] = {"$lte": query.created_before}

    return mongo_query


MATCH_ALL = "all"


def build_list_query(search: str | None, search_fields: Sequence[str], **equals: str | None) -> dict[str, Any]:
    """Filter for list endpoints.

    search is a case-insensitive substring match on any of search_fields, taken literally.
    Each keyword in equals is an exact match on that field; None or "all" leaves it unfiltered.
    """
    mongo_query: dict[str, Any] = {}

    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        if len(search_fields) == 1:
            mongo_query[search_fields[0]] = pattern
        else:
            mongo_query["$or"] = [{field: pattern} for field in search_fields]

    for field, value in equals.items():
        if value is not None and value != MATCH_ALL:
            mongo_query[field] = {"$eq": value}

    return mongo_query


class DocumentStore(Protocol):
    """Read-only queries the metrics code needs from persistence."""

    async def count(self, collection: Collection, query: DocumentQuery) -> int: ...

    async def sum(self, collection: Collection, field: str, query: DocumentQuery) -> Decimal: ...

    async def find_recent(self, collection: Collection, limit: int) -> list[dict[str, Any]]: ...


def translate_store_errors[**P, R](func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise pymongo connectivity failures as StoreUnavailableError."""

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except (ConnectionFailure, ExecutionTimeout) as e:
            raise StoreUnavailableError(f"Database unavailable: {e}") from e

    return wrapper


class MongoDocumentStore:
    """DocumentStore backed by MongoDB collections."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._database = database

    @translate_store_errors
    async def count(self, collection: Collection, query: DocumentQuery) -> int:
        return await self._database.get_collection(collection).count_documents(build_mongo_query(query))

    @translate_store_errors
    async def sum(self, collection: Collection, field: str, query: DocumentQuery) -> Decimal:
        pipeline: list[dict[str, Any]] = [
            {"$match": build_mongo_query(query)},
            {"$group": {"_id": None, "total": {"$sum": f"${field}"}}},
        ]
        cursor = await self._database.get_collection(collection).aggregate(pipeline)
        docs = await cursor.to_list()
        if not docs or docs[0]["total"] is None:
            return Decimal(0)
        return to_decimal(docs[0]["total"])

    @translate_store_errors
    async def find_recent(self, collection: Collection, limit: int) -> list[dict[str, Any]]:
        cursor = self._database.get_collection(collection).find().sort("created_at", -1).limit(limit)
        return await cursor.to_list()


async def insert_numbered(collection: AsyncCollection[dict[str, Any]], document: dict[str, Any], number: str) -> None:
    """Insert a document that carries an allocated number.

    The unique index on number only trips for a colliding fallback identifier;
    that is reported as a retriable store failure.
    """
    try:
        await collection.insert_one(document)
    except DuplicateKeyError as e:
        logger.warning("identifier_fallback_collision", collection=collection.name, number=number)
        raise StoreUnavailableError(f"Document number {number} is already taken, please retry") from e
