"""Unit tests for arangodriver.arangodb.cluster module."""

from unittest.mock import MagicMock

import pytest

from arangodriver.arangodb.cluster import DBServerMaintenanceMode, RebalanceMove, RebalanceOptions
from arangodriver.errors import InvalidArgumentError

HEALTH = {
    "ClusterId": "c-1",
    "Health": {
        "PRMR-1": {"Role": "DBServer", "Status": "GOOD", "ShortName": "DBServer0001", "Host": "h1"},
        "CRDN-1": {"Role": "Coordinator", "Status": "GOOD", "Endpoint": "tcp://coord:8529"},
    },
}


class TestClusterHealth:
    """Tests for cluster health and inventory."""

    def test_cluster_health(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_admin/cluster/health", json=HEALTH)
        health = client.cluster_health()
        assert health.cluster_id == "c-1"
        assert health.health["PRMR-1"].short_name == "DBServer0001"
        assert health.health["PRMR-1"].host_id == "h1"
        assert list(health.servers_with_role("Coordinator")) == ["CRDN-1"]

    def test_database_inventory(self, fake_arango, client) -> None:
        fake_arango.add(
            "GET",
            "/_db/foo/_api/replication/clusterInventory",
            json={"collections": [{"parameters": {"name": "users"}, "allInSync": True}], "views": []},
        )
        inventory = client.database_inventory("foo")
        assert inventory.collection_by_name("users")["allInSync"] is True
        assert inventory.collection_by_name("missing") is None


class TestClusterJobs:
    """Tests for shard moves and server removal."""

    def test_move_shard(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/cluster/moveShard", status=202, json={"id": "job-7"})
        collection = MagicMock()
        collection.name = "users"
        collection.database.name = "foo"
        assert client.move_shard(collection, "s100", "PRMR-1", "PRMR-2") == "job-7"
        assert fake_arango.body(fake_arango.last_request) == {
            "database": "foo",
            "collection": "users",
            "shard": "s100",
            "fromServer": "PRMR-1",
            "toServer": "PRMR-2",
        }

    def test_clean_out_and_resign(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/cluster/cleanOutServer", status=202, json={"id": "1"})
        fake_arango.add("POST", "/_admin/cluster/resignLeadership", json={"id": "2"})
        assert client.clean_out_server("PRMR-1") == "1"
        assert client.resign_server("PRMR-1") == "2"
        assert fake_arango.body(fake_arango.last_request) == {"server": "PRMR-1"}

    def test_is_cleaned_out(self, fake_arango, client) -> None:
        fake_arango.add(
            "GET",
            "/_admin/cluster/numberOfServers",
            json={"numberOfCoordinators": 2, "numberOfDBServers": 3, "cleanedServers": ["PRMR-3"]},
        )
        assert client.number_of_servers().number_of_db_servers == 3
        assert client.is_cleaned_out("PRMR-3")
        assert not client.is_cleaned_out("PRMR-1")

    def test_remove_server(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/cluster/removeServer", json={"error": False})
        client.remove_server("PRMR-3")
        assert fake_arango.body(fake_arango.last_request) == "PRMR-3"


class TestMaintenance:
    """Tests for maintenance and statistics calls."""

    def test_statistics(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_admin/cluster/statistics", json={"http": {}})
        assert client.cluster_statistics("PRMR-1") == {"http": {}}
        assert fake_arango.last_request.url.params["DBserver"] == "PRMR-1"

    @pytest.mark.parametrize("method", ["cluster_statistics", "dbserver_maintenance"])
    def test_db_server_required(self, client, method) -> None:
        with pytest.raises(InvalidArgumentError):
            getattr(client, method)("")

    def test_dbserver_maintenance(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_admin/cluster/maintenance/PRMR-1", json={"result": {"mode": "maintenance"}})
        fake_arango.add("PUT", "/_admin/cluster/maintenance/PRMR-1", json={"error": False})
        assert client.dbserver_maintenance("PRMR-1").mode == "maintenance"
        client.set_dbserver_maintenance("PRMR-1", DBServerMaintenanceMode.MAINTENANCE, timeout=60)
        assert fake_arango.body(fake_arango.last_request) == {"mode": "maintenance", "timeout": 60}

    def test_cluster_maintenance(self, fake_arango, client) -> None:
        fake_arango.add("PUT", "/_admin/cluster/maintenance", json={"error": False})
        client.set_cluster_maintenance("on")
        assert fake_arango.body(fake_arango.last_request) == "on"
        with pytest.raises(InvalidArgumentError):
            client.set_cluster_maintenance("")


class TestRebalance:
    """Tests for shard rebalancing."""

    MOVE = {"from": "PRMR-1", "to": "PRMR-2", "shard": "s1", "collection": "100", "isLeader": True}

    def test_compute(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/cluster/rebalance", json={"result": {"moves": [self.MOVE]}})
        moves = client.compute_cluster_rebalance(RebalanceOptions(move_leaders=True, pi_factor=256.0))
        assert moves[0].from_ == "PRMR-1"
        assert moves[0].is_leader
        assert fake_arango.body(fake_arango.last_request) == {"version": 1, "moveLeaders": True, "piFactor": 256.0}

    def test_execute(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/cluster/rebalance/execute", status=202)
        client.execute_cluster_rebalance([RebalanceMove.model_validate(self.MOVE)])
        assert fake_arango.body(fake_arango.last_request) == {"version": 1, "moves": [self.MOVE]}

    def test_imbalance(self, fake_arango, client) -> None:
        fake_arango.add("GET", "/_admin/cluster/rebalance", json={"result": {"leader": {}, "shards": {}}})
        assert client.cluster_rebalance() == {"leader": {}, "shards": {}}
