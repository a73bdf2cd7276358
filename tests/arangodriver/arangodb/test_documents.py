"""Unit tests for arangodriver.arangodb.documents module."""

from unittest.mock import patch

import orjson
import pytest

from arangodriver.arangodb.documents import (
    DocumentCreateOptions,
    DocumentDeleteOptions,
    DocumentReadOptions,
    DocumentReplaceOptions,
    DocumentUpdateOptions,
    ImportOnDuplicate,
    ImportOptions,
    OverwriteMode,
)
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found, is_precondition_failed

DOC = "/_db/testdb/_api/document/users"


@pytest.fixture
def users(fake_arango, db):
    fake_arango.add("GET", "/_db/testdb/_api/collection/users", json={"name": "users"})
    return db.collection("users")


class TestReadDocuments:
    """Tests for reading documents."""

    def test_read_document(self, fake_arango, users) -> None:
        fake_arango.add("GET", f"{DOC}/alice", json={"_key": "alice", "_rev": "_a1", "age": 30})
        assert users.read_document("alice")["age"] == 30

    def test_read_by_id(self, fake_arango, users) -> None:
        fake_arango.add("GET", f"{DOC}/alice", json={"_key": "alice"})
        users.read_document("users/alice")
        assert fake_arango.last_request.url.path == f"{DOC}/alice"

    def test_read_missing_document(self, fake_arango, users) -> None:
        fake_arango.add_error("GET", f"{DOC}/bob", 404, error_num=1202)
        with pytest.raises(ArangoError) as excinfo:
            users.read_document("bob")
        assert is_not_found(excinfo.value)

    def test_if_none_match_not_modified(self, fake_arango, users) -> None:
        fake_arango.add("GET", f"{DOC}/alice", status=304)
        assert users.read_document("alice", DocumentReadOptions(if_none_match="_a1")) is None
        assert fake_arango.last_request.headers["if-none-match"] == "_a1"

    def test_dirty_reads_header(self, fake_arango, users) -> None:
        fake_arango.add("GET", f"{DOC}/alice", json={"_key": "alice"})
        users.read_document("alice", DocumentReadOptions(allow_dirty_reads=True))
        assert fake_arango.last_request.headers["x-arango-allow-dirty-read"] == "true"

    def test_empty_key_is_rejected(self, users) -> None:
        with pytest.raises(InvalidArgumentError):
            users.read_document("")

    def test_document_exists(self, fake_arango, users) -> None:
        fake_arango.add("HEAD", f"{DOC}/alice", status=200)
        fake_arango.add("HEAD", f"{DOC}/bob", status=404)
        fake_arango.add("HEAD", f"{DOC}/carol", status=500)
        assert users.document_exists("alice")
        assert not users.document_exists("bob")
        with pytest.raises(ArangoError):
            users.document_exists("carol")

    def test_read_documents_mixes_errors(self, fake_arango, users) -> None:
        fake_arango.add(
            "PUT",
            DOC,
            json=[
                {"_key": "alice", "age": 30},
                {"error": True, "errorNum": 1202, "errorMessage": "document not found"},
            ],
        )

        results = users.read_documents(["alice", {"_key": "bob"}])

        assert results[0]["age"] == 30
        assert isinstance(results[1], ArangoError)
        assert is_not_found(results[1])
        request = fake_arango.last_request
        assert request.url.params["onlyget"] == "true"
        assert fake_arango.body(request) == ["alice", "bob"]


class TestWriteDocuments:
    """Tests for creating, updating, replacing and deleting documents."""

    def test_create_document(self, fake_arango, users) -> None:
        fake_arango.add(
            "POST", DOC, status=201, json={"_key": "alice", "_id": "users/alice", "_rev": "_a1", "new": {"age": 30}}
        )
        options = DocumentCreateOptions(return_new=True, overwrite_mode=OverwriteMode.UPDATE, wait_for_sync=True)

        result = users.create_document({"_key": "alice", "age": 30}, options)

        assert result.key == "alice"
        assert result.id == "users/alice"
        assert result.new == {"age": 30}
        params = fake_arango.last_request.url.params
        assert params["returnNew"] == "true"
        assert params["overwriteMode"] == "update"
        assert params["waitForSync"] == "true"
        assert "silent" not in params

    def test_create_document_conflict(self, fake_arango, users) -> None:
        fake_arango.add_error("POST", DOC, 409, error_num=1210, message="unique constraint violated")
        with pytest.raises(ArangoError) as excinfo:
            users.create_document({"_key": "alice"})
        assert is_precondition_failed(excinfo.value)

    def test_create_documents_reports_per_document_errors(self, fake_arango, users) -> None:
        fake_arango.add(
            "POST",
            DOC,
            status=202,
            json=[
                {"_key": "a", "_rev": "_1"},
                {"error": True, "errorNum": 1210, "errorMessage": "unique constraint violated"},
            ],
        )
        results = users.create_documents([{"_key": "a"}, {"_key": "b"}])
        assert results[0].key == "a"
        assert isinstance(results[1], ArangoError)
        assert results[1].error_num == 1210

    def test_silent_create_documents(self, fake_arango, users) -> None:
        fake_arango.add("POST", DOC, status=202, json={})
        assert users.create_documents([{"a": 1}], DocumentCreateOptions(silent=True)) == []

    def test_update_document(self, fake_arango, users) -> None:
        fake_arango.add("PATCH", f"{DOC}/alice", status=201, json={"_key": "alice", "_rev": "_a2", "_oldRev": "_a1"})
        result = users.update_document("alice", {"age": 31}, DocumentUpdateOptions(if_match="_a1", keep_null=False))
        assert result.old_rev == "_a1"
        request = fake_arango.last_request
        assert request.headers["if-match"] == "_a1"
        assert request.url.params["keepNull"] == "false"
        assert fake_arango.body(request) == {"age": 31}

    def test_update_document_rev_mismatch(self, fake_arango, users) -> None:
        fake_arango.add_error("PATCH", f"{DOC}/alice", 412, error_num=1200)
        with pytest.raises(ArangoError) as excinfo:
            users.update_document("alice", {"age": 31}, DocumentUpdateOptions(if_match="_old"))
        assert is_precondition_failed(excinfo.value)

    def test_update_documents_fill_keys_from_id(self, fake_arango, users) -> None:
        fake_arango.add("PATCH", DOC, status=201, json=[{"_key": "a"}])
        users.update_documents([{"_id": "users/a", "x": 1}])
        assert fake_arango.body(fake_arango.last_request) == [{"_id": "users/a", "_key": "a", "x": 1}]

    def test_update_documents_require_keys(self, users) -> None:
        with pytest.raises(InvalidArgumentError):
            users.update_documents([{"x": 1}])

    def test_replace_document(self, fake_arango, users) -> None:
        fake_arango.add("PUT", f"{DOC}/alice", status=202, json={"_key": "alice", "old": {"age": 30}})
        result = users.replace_document("alice", {"age": 40}, DocumentReplaceOptions(return_old=True))
        assert result.old == {"age": 30}

    def test_replace_documents(self, fake_arango, users) -> None:
        fake_arango.add("PUT", DOC, status=201, json=[{"_key": "a"}, {"_key": "b"}])
        results = users.replace_documents([{"_key": "a"}, {"_key": "b"}])
        assert [r.key for r in results] == ["a", "b"]

    def test_delete_document(self, fake_arango, users) -> None:
        fake_arango.add("DELETE", f"{DOC}/alice", json={"_key": "alice", "_rev": "_a1"})
        result = users.delete_document("alice", DocumentDeleteOptions(return_old=False))
        assert result.rev == "_a1"

    def test_delete_documents_sends_keys(self, fake_arango, users) -> None:
        fake_arango.add("DELETE", DOC, json=[{"_key": "a"}, {"error": True, "errorNum": 1202, "code": 404}])
        results = users.delete_documents(["a", "users/b"])
        assert fake_arango.body(fake_arango.last_request) == ["a", "b"]
        assert isinstance(results[1], ArangoError)
        assert results[1].status_code == 404


class TestImportDocuments:
    """Tests for bulk import."""

    def test_streamed_ndjson(self, fake_arango, users) -> None:
        fake_arango.add("POST", "/_db/testdb/_api/import", status=201, json={"created": 2, "errors": 0})
        options = ImportOptions(on_duplicate=ImportOnDuplicate.UPDATE, complete=True)

        stats = users.import_documents(iter([{"_key": "a"}, {"_key": "b"}]), options)

        assert stats.created == 2
        request = fake_arango.last_request
        assert request.headers["content-type"] == "application/x-ndjson"
        assert request.url.params["collection"] == "users"
        assert request.url.params["type"] == "documents"
        assert request.url.params["onDuplicate"] == "update"
        lines = request.content.split(b"\n")
        assert [orjson.loads(line) for line in lines] == [{"_key": "a"}, {"_key": "b"}]

    def test_buffered_ndjson(self, fake_arango, users) -> None:
        fake_arango.add("POST", "/_db/testdb/_api/import", status=201, json={"created": 1})
        users.import_documents([{"x": 1}], stream=False)
        assert fake_arango.last_request.content == b'{"x":1}'

    def test_headers_do_not_depend_on_environment(self, fake_arango, users) -> None:
        fake_arango.add("POST", "/_db/testdb/_api/import", status=201, json={"created": 1})
        with patch.dict("os.environ", {"ARANGODRIVER_TRACE_ID": "abc"}):
            users.import_documents([{"x": 1}])
        headers = {name.lower() for name in fake_arango.last_request.headers}
        assert not any("trace" in name for name in headers)

    def test_nothing_to_import(self, fake_arango, users) -> None:
        count = len(fake_arango.requests)
        assert users.import_documents([]).created == 0
        assert len(fake_arango.requests) == count
