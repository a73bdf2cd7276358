"""Unit tests for arangodriver.arangodb.replication module."""

import pytest

from arangodriver.arangodb.replication import ApplierConfig
from arangodriver.errors import InvalidArgumentError

REPL = "/_db/foo/_api/replication"


@pytest.fixture
def single(fake_arango):
    fake_arango.add("GET", "/_admin/server/role", json={"role": "SINGLE", "mode": "default"})
    return fake_arango


@pytest.fixture
def coordinator(fake_arango):
    fake_arango.add("GET", "/_admin/server/role", json={"role": "COORDINATOR"})
    return fake_arango


class TestBatches:
    """Tests for dump batches."""

    def test_create_batch_on_single(self, single, client) -> None:
        single.add("POST", f"{REPL}/batch", json={"id": "42", "lastTick": "100"})
        batch = client.create_batch("foo", ttl=600, state=True)
        assert batch.id == "42"
        assert batch.last_tick == "100"
        request = single.last_request
        assert single.body(request) == {"ttl": 600}
        assert request.url.params["state"] == "true"
        assert "DBserver" not in request.url.params

    def test_coordinator_requires_db_server(self, coordinator, client) -> None:
        with pytest.raises(InvalidArgumentError):
            client.create_batch("foo", ttl=600)

    def test_coordinator_forwards_to_db_server(self, coordinator, client) -> None:
        coordinator.add("PUT", f"{REPL}/batch/42", status=204)
        coordinator.add("DELETE", f"{REPL}/batch/42", status=204)
        client.extend_batch("foo", "42", ttl=60, db_server="PRMR-1")
        assert coordinator.last_request.url.params["DBserver"] == "PRMR-1"
        client.delete_batch("foo", "42", db_server="PRMR-1")
        assert coordinator.last_request.method == "DELETE"

    def test_inventory(self, single, client) -> None:
        single.add("GET", f"{REPL}/inventory", json={"collections": [], "views": [], "tick": "7"})
        assert client.inventory("foo", "42", include_system=True)["tick"] == "7"
        params = single.last_request.url.params
        assert params["batchId"] == "42"
        assert params["includeSystem"] == "true"
        assert params["global"] == "false"

    def test_inventory_requires_batch(self, client) -> None:
        with pytest.raises(InvalidArgumentError):
            client.inventory("foo", "")


class TestLoggerAndApplier:
    """Tests for the replication logger and applier."""

    def test_logger(self, single, client) -> None:
        single.add("GET", f"{REPL}/logger-state", json={"state": {"running": True}, "clients": []})
        single.add("GET", f"{REPL}/logger-first-tick", json={"firstTick": "12"})
        single.add("GET", f"{REPL}/logger-tick-ranges", json=[{"datafile": "x"}])
        assert client.logger_state("foo").state == {"running": True}
        assert client.logger_first_tick("foo") == "12"
        assert client.logger_tick_ranges("foo") == [{"datafile": "x"}]

    def test_applier_config(self, fake_arango, client) -> None:
        fake_arango.add("GET", f"{REPL}/applier-config", json={"endpoint": "tcp://leader:8529", "chunkSize": 1024})
        fake_arango.add("PUT", f"{REPL}/applier-config", json={"endpoint": "tcp://other:8529"})
        assert client.applier_config("foo").chunk_size == 1024
        config = client.set_applier_config("foo", ApplierConfig(endpoint="tcp://other:8529", auto_start=True))
        assert config.endpoint == "tcp://other:8529"
        assert fake_arango.body(fake_arango.last_request) == {"endpoint": "tcp://other:8529", "autoStart": True}

    def test_start_applier(self, single, client) -> None:
        single.add("PUT", f"{REPL}/applier-start", json={"state": {"running": True}})
        assert client.start_applier("foo", from_tick="99").state == {"running": True}
        assert single.last_request.url.params["from"] == "99"

    def test_applier_not_on_coordinator(self, coordinator, client) -> None:
        with pytest.raises(InvalidArgumentError):
            client.stop_applier("foo")


class TestWriteAheadLog:
    """Tests for server id and WAL calls."""

    def test_server_id(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_db/_system/_api/replication/server-id", json={"serverId": "1234"})
        assert client.replication_server_id() == "1234"

    def test_wal(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_db/_system/_api/wal/range", json={"tickMin": "1", "tickMax": "9"})
        fake_arango.add("GET", "/_db/_system/_api/wal/lastTick", json={"tick": "9"})
        assert client.wal_range().tick_max == "9"
        assert client.wal_last_tick() == {"tick": "9"}
