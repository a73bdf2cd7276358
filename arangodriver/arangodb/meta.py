"""Document metadata and the header and query names shared across resources."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from arangodriver.arangodb.models import ArangoModel
from arangodriver.errors import InvalidArgumentError

HEADER_DIRTY_READS = "x-arango-allow-dirty-read"
HEADER_TRANSACTION = "x-arango-trx-id"
HEADER_IF_MATCH = "If-Match"
HEADER_IF_NONE_MATCH = "If-None-Match"

QUERY_REV = "rev"
QUERY_IGNORE_REVS = "ignoreRevs"
QUERY_WAIT_FOR_SYNC = "waitForSync"
QUERY_RETURN_NEW = "returnNew"
QUERY_RETURN_OLD = "returnOld"
QUERY_KEEP_NULL = "keepNull"
QUERY_DIRECTION = "direction"
QUERY_SILENT = "silent"
QUERY_REFILL_INDEX_CACHES = "refillIndexCaches"
QUERY_MERGE_OBJECTS = "mergeObjects"
QUERY_OVERWRITE = "overwrite"
QUERY_OVERWRITE_MODE = "overwriteMode"
QUERY_VERSION_ATTRIBUTE = "versionAttribute"
QUERY_IS_RESTORE = "isRestore"


class DocumentMeta(ArangoModel):
    """``_key``, ``_id`` and ``_rev`` of a stored document."""

    key: str | None = Field(default=None, alias="_key")
    id: str | None = Field(default=None, alias="_id")
    rev: str | None = Field(default=None, alias="_rev")


class DocumentMetaWithOldRev(DocumentMeta):
    old_rev: str | None = Field(default=None, alias="_oldRev")


def validate_key(key: str) -> str:
    """Return ``key`` unchanged, rejecting empty keys."""
    if not key:
        raise InvalidArgumentError("key is empty")
    return key


def document_key(value: str | dict[str, Any]) -> str:
    """Extract the key from a key, a ``collection/key`` id or a document dict."""
    if isinstance(value, dict):
        key = value.get("_key")
        if not key and value.get("_id"):
            key = str(value["_id"]).split("/", 1)[-1]
        return validate_key(key or "")
    return validate_key(str(value).split("/", 1)[-1])


__all__ = [
    "DocumentMeta",
    "DocumentMetaWithOldRev",
    "HEADER_DIRTY_READS",
    "HEADER_IF_MATCH",
    "HEADER_IF_NONE_MATCH",
    "HEADER_TRANSACTION",
    "QUERY_DIRECTION",
    "QUERY_IGNORE_REVS",
    "QUERY_IS_RESTORE",
    "QUERY_KEEP_NULL",
    "QUERY_MERGE_OBJECTS",
    "QUERY_OVERWRITE",
    "QUERY_OVERWRITE_MODE",
    "QUERY_REFILL_INDEX_CACHES",
    "QUERY_RETURN_NEW",
    "QUERY_RETURN_OLD",
    "QUERY_REV",
    "QUERY_SILENT",
    "QUERY_VERSION_ATTRIBUTE",
    "QUERY_WAIT_FOR_SYNC",
    "document_key",
    "validate_key",
]
