"""Document CRUD and bulk import for a collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import orjson

from arangodriver.arangodb.base import ApiBase, RequestOptions
from arangodriver.arangodb.meta import (
    HEADER_DIRTY_READS,
    HEADER_IF_MATCH,
    HEADER_IF_NONE_MATCH,
    QUERY_IGNORE_REVS,
    QUERY_IS_RESTORE,
    QUERY_KEEP_NULL,
    QUERY_MERGE_OBJECTS,
    QUERY_OVERWRITE,
    QUERY_OVERWRITE_MODE,
    QUERY_REFILL_INDEX_CACHES,
    QUERY_RETURN_NEW,
    QUERY_RETURN_OLD,
    QUERY_SILENT,
    QUERY_VERSION_ATTRIBUTE,
    QUERY_WAIT_FOR_SYNC,
    DocumentMetaWithOldRev,
    document_key,
)
from arangodriver.arangodb.models import ArangoModel
from arangodriver.connection.call import escape, with_query, with_raw_body
from arangodriver.connection.request import Response
from arangodriver.errors import ArangoError, InvalidArgumentError, ResponseError

Document = dict[str, Any]


class OverwriteMode(str, Enum):
    IGNORE = "ignore"
    REPLACE = "replace"
    UPDATE = "update"
    CONFLICT = "conflict"


class ImportOnDuplicate(str, Enum):
    ERROR = "error"
    UPDATE = "update"
    REPLACE = "replace"
    IGNORE = "ignore"


class ImportDocumentType(str, Enum):
    DOCUMENTS = "documents"
    ARRAY = "array"
    AUTO = "auto"


class DocumentResponse(DocumentMetaWithOldRev):
    """Metadata of a written document plus ``new``/``old`` when requested."""

    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None


class ImportStatistics(ArangoModel):
    created: int = 0
    errors: int = 0
    empty: int = 0
    updated: int = 0
    ignored: int = 0
    details: list[str] | None = None


@dataclass
class DocumentReadOptions(RequestOptions):
    if_match: str | None = None
    if_none_match: str | None = None
    allow_dirty_reads: bool | None = None
    ignore_revs: bool | None = None

    _queries: ClassVar[dict[str, str]] = {"ignore_revs": QUERY_IGNORE_REVS}
    _headers: ClassVar[dict[str, str]] = {
        "if_match": HEADER_IF_MATCH,
        "if_none_match": HEADER_IF_NONE_MATCH,
    }

    def __call__(self, request) -> None:
        super().__call__(request)
        if self.allow_dirty_reads is not None:
            request.add_header(HEADER_DIRTY_READS, "true" if self.allow_dirty_reads else "false")


@dataclass
class DocumentCreateOptions(RequestOptions):
    wait_for_sync: bool | None = None
    overwrite: bool | None = None
    overwrite_mode: OverwriteMode | str | None = None
    silent: bool | None = None
    return_new: bool | None = None
    return_old: bool | None = None
    keep_null: bool | None = None
    merge_objects: bool | None = None
    refill_index_caches: bool | None = None
    version_attribute: str | None = None

    _queries: ClassVar[dict[str, str]] = {
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "overwrite": QUERY_OVERWRITE,
        "overwrite_mode": QUERY_OVERWRITE_MODE,
        "silent": QUERY_SILENT,
        "return_new": QUERY_RETURN_NEW,
        "return_old": QUERY_RETURN_OLD,
        "keep_null": QUERY_KEEP_NULL,
        "merge_objects": QUERY_MERGE_OBJECTS,
        "refill_index_caches": QUERY_REFILL_INDEX_CACHES,
        "version_attribute": QUERY_VERSION_ATTRIBUTE,
    }

    def __post_init__(self) -> None:
        if isinstance(self.overwrite_mode, OverwriteMode):
            self.overwrite_mode = self.overwrite_mode.value


@dataclass
class DocumentUpdateOptions(RequestOptions):
    if_match: str | None = None
    ignore_revs: bool | None = None
    wait_for_sync: bool | None = None
    silent: bool | None = None
    return_new: bool | None = None
    return_old: bool | None = None
    keep_null: bool | None = None
    merge_objects: bool | None = None
    refill_index_caches: bool | None = None
    version_attribute: str | None = None

    _queries: ClassVar[dict[str, str]] = {
        "ignore_revs": QUERY_IGNORE_REVS,
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "silent": QUERY_SILENT,
        "return_new": QUERY_RETURN_NEW,
        "return_old": QUERY_RETURN_OLD,
        "keep_null": QUERY_KEEP_NULL,
        "merge_objects": QUERY_MERGE_OBJECTS,
        "refill_index_caches": QUERY_REFILL_INDEX_CACHES,
        "version_attribute": QUERY_VERSION_ATTRIBUTE,
    }
    _headers: ClassVar[dict[str, str]] = {"if_match": HEADER_IF_MATCH}


@dataclass
class DocumentReplaceOptions(RequestOptions):
    if_match: str | None = None
    ignore_revs: bool | None = None
    wait_for_sync: bool | None = None
    silent: bool | None = None
    return_new: bool | None = None
    return_old: bool | None = None
    refill_index_caches: bool | None = None
    is_restore: bool | None = None
    version_attribute: str | None = None

    _queries: ClassVar[dict[str, str]] = {
        "ignore_revs": QUERY_IGNORE_REVS,
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "silent": QUERY_SILENT,
        "return_new": QUERY_RETURN_NEW,
        "return_old": QUERY_RETURN_OLD,
        "refill_index_caches": QUERY_REFILL_INDEX_CACHES,
        "is_restore": QUERY_IS_RESTORE,
        "version_attribute": QUERY_VERSION_ATTRIBUTE,
    }
    _headers: ClassVar[dict[str, str]] = {"if_match": HEADER_IF_MATCH}


@dataclass
class DocumentDeleteOptions(RequestOptions):
    if_match: str | None = None
    ignore_revs: bool | None = None
    wait_for_sync: bool | None = None
    return_old: bool | None = None
    silent: bool | None = None
    refill_index_caches: bool | None = None

    _queries: ClassVar[dict[str, str]] = {
        "ignore_revs": QUERY_IGNORE_REVS,
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "return_old": QUERY_RETURN_OLD,
        "silent": QUERY_SILENT,
        "refill_index_caches": QUERY_REFILL_INDEX_CACHES,
    }
    _headers: ClassVar[dict[str, str]] = {"if_match": HEADER_IF_MATCH}


@dataclass
class ImportOptions(RequestOptions):
    from_prefix: str | None = None
    to_prefix: str | None = None
    overwrite: bool | None = None
    on_duplicate: ImportOnDuplicate | str | None = None
    complete: bool | None = None
    wait_for_sync: bool | None = None
    details: bool | None = None

    _queries: ClassVar[dict[str, str]] = {
        "from_prefix": "fromPrefix",
        "to_prefix": "toPrefix",
        "overwrite": QUERY_OVERWRITE,
        "on_duplicate": "onDuplicate",
        "complete": "complete",
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "details": "details",
    }

    def __post_init__(self) -> None:
        if isinstance(self.on_duplicate, ImportOnDuplicate):
            self.on_duplicate = self.on_duplicate.value


def _item_result(item: Any, status_code: int) -> DocumentResponse | ArangoError:
    if isinstance(item, dict) and item.get("error"):
        return ArangoError.from_envelope(status_code, item)
    return DocumentResponse.model_validate(item or {})


def _item_document(item: Any, status_code: int) -> Document | ArangoError:
    if isinstance(item, dict) and item.get("error"):
        return ArangoError.from_envelope(status_code, item)
    return item


def _results(response: Response, data: Any, parse) -> list:
    if not isinstance(data, list):
        raise ResponseError(f"expected a list of results, got {type(data).__name__}")
    return [parse(item, response.code) for item in data]


class CollectionDocuments(ApiBase):
    """Document operations, mixed into :class:`~arangodriver.arangodb.collection.Collection`.

    Single document calls raise :class:`ArangoError`. Multi document calls
    never raise for per-document failures: each input gets one entry in the
    returned list, either a result or the :class:`ArangoError` describing why
    that document failed.
    """

    name: str

    def _document_url(self, *parts: str) -> str:
        return self._url("_api", "document", escape(self.name), *parts)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def document_exists(self, key: str) -> bool:
        response = self._head(self._document_url(escape(document_key(key))))
        if response.code == 200:
            return True
        if response.code == 404:
            return False
        raise response.as_arango_error()

    def read_document(self, key: str, options: DocumentReadOptions | None = None) -> Document | None:
        """Fetch one document.

        Returns:
            The document, or None when ``if_none_match`` matched the current revision

        Raises:
            ArangoError: 404 when missing, 412 when ``if_match`` does not match
        """
        response = self._get(self._document_url(escape(document_key(key))), options)
        if response.code == 304:
            return None
        return response.expect(200)

    def read_documents(
        self, keys: Iterable[str | Document], options: DocumentReadOptions | None = None
    ) -> list[Document | ArangoError]:
        body = [document_key(k) for k in keys]
        response = self._put(self._document_url(), body, with_query("onlyget", True), options)
        return _results(response, response.expect(200), _item_document)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    def create_document(self, document: Document, options: DocumentCreateOptions | None = None) -> DocumentResponse:
        response = self._post(self._document_url(), document, options)
        return DocumentResponse.model_validate(response.expect(201, 202) or {})

    def create_documents(
        self, documents: Iterable[Document], options: DocumentCreateOptions | None = None
    ) -> list[DocumentResponse | ArangoError]:
        response = self._post(self._document_url(), list(documents), options)
        data = response.expect(201, 202)
        if data is None or data == {}:
            return []
        return _results(response, data, _item_result)

    # ------------------------------------------------------------------
    # Update / replace
    # ------------------------------------------------------------------
    def update_document(
        self, key: str, patch: Document, options: DocumentUpdateOptions | None = None
    ) -> DocumentResponse:
        response = self._patch(self._document_url(escape(document_key(key))), patch, options)
        return DocumentResponse.model_validate(response.expect(201, 202) or {})

    def update_documents(
        self, patches: Iterable[Document], options: DocumentUpdateOptions | None = None
    ) -> list[DocumentResponse | ArangoError]:
        body = _with_keys(patches)
        response = self._patch(self._document_url(), body, options)
        return _results(response, response.expect(201, 202) or [], _item_result)

    def replace_document(
        self, key: str, document: Document, options: DocumentReplaceOptions | None = None
    ) -> DocumentResponse:
        response = self._put(self._document_url(escape(document_key(key))), document, options)
        return DocumentResponse.model_validate(response.expect(201, 202) or {})

    def replace_documents(
        self, documents: Iterable[Document], options: DocumentReplaceOptions | None = None
    ) -> list[DocumentResponse | ArangoError]:
        body = _with_keys(documents)
        response = self._put(self._document_url(), body, options)
        return _results(response, response.expect(201, 202) or [], _item_result)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def delete_document(self, key: str, options: DocumentDeleteOptions | None = None) -> DocumentResponse:
        response = self._delete(self._document_url(escape(document_key(key))), options)
        return DocumentResponse.model_validate(response.expect(200, 202) or {})

    def delete_documents(
        self, keys: Iterable[str | Document], options: DocumentDeleteOptions | None = None
    ) -> list[DocumentResponse | ArangoError]:
        body = [document_key(k) for k in keys]
        response = self._delete(self._document_url(), options, body=body)
        return _results(response, response.expect(200, 202) or [], _item_result)

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------
    def import_documents(
        self,
        documents: Iterable[Document],
        options: ImportOptions | None = None,
        stream: bool = True,
    ) -> ImportStatistics:
        """Bulk insert documents using NDJSON import.

        Args:
            documents: Iterable of documents to insert
            options: Import behaviour (duplicates handling, prefixes, ...)
            stream: If True (default), stream documents without buffering entire
                payload in memory. Uses chunked transfer encoding. Set to False
                for compatibility with servers that require Content-Length.

        Returns:
            Import statistics (created, errors, etc.)
        """
        document_iter = iter(documents)
        try:
            first_doc = next(document_iter)
        except StopIteration:
            return ImportStatistics()

        if stream:
            # Streaming mode: generator avoids buffering the entire payload
            content: bytes | Iterator[bytes] = _ndjson_stream_with_first(first_doc, document_iter)
        else:
            content = _ndjson_buffer(first_doc, document_iter)

        modifiers = [
            with_query("collection", self.name),
            with_query("type", ImportDocumentType.DOCUMENTS.value),
            with_raw_body(content, "application/x-ndjson"),
            options,
        ]

        response = self._call("POST", self._url("_api", "import"), *modifiers)
        return ImportStatistics.model_validate(response.expect(201) or {})


def _with_keys(documents: Iterable[Document]) -> list[Document]:
    body = []
    for doc in documents:
        if not isinstance(doc, dict):
            raise InvalidArgumentError("documents must be dicts carrying _key or _id")
        key = document_key(doc)
        body.append(doc if doc.get("_key") else {**doc, "_key": key})
    return body


def _ndjson_stream_with_first(first_doc: Document, rest: Iterator[Document]) -> Iterator[bytes]:
    """Generate NDJSON lines as a stream, starting with a pre-peeked first document."""
    yield orjson.dumps(first_doc)
    for doc in rest:
        yield b"\n" + orjson.dumps(doc)


def _ndjson_buffer(first_doc: Document, rest: Iterator[Document]) -> bytes:
    parts = [orjson.dumps(first_doc)]
    for doc in rest:
        parts.append(b"\n")
        parts.append(orjson.dumps(doc))
    return b"".join(parts)


__all__ = [
    "CollectionDocuments",
    "Document",
    "DocumentCreateOptions",
    "DocumentDeleteOptions",
    "DocumentReadOptions",
    "DocumentReplaceOptions",
    "DocumentResponse",
    "DocumentUpdateOptions",
    "ImportDocumentType",
    "ImportOnDuplicate",
    "ImportOptions",
    "ImportStatistics",
    "OverwriteMode",
]
