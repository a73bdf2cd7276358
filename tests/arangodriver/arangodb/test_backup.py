"""Unit tests for arangodriver.arangodb.backup module."""

import pytest

from arangodriver.arangodb.backup import (
    BackupCreateOptions,
    BackupTransferProgress,
    TransferMonitor,
    TransferType,
)
from arangodriver.errors import InvalidArgumentError

REPO = "S3://backups/arango"
RCLONE = {"S3": {"type": "s3", "provider": "minio"}}


class TestClientBackup:
    """Tests for local hot backups."""

    def test_create(self, fake_arango, client) -> None:
        fake_arango.add(
            "POST",
            "/_admin/backup/create",
            status=201,
            json={"result": {"id": "2024-01-01T00.00.00Z_nightly", "nrDBServers": 3, "datetime": "2024-01-01"}},
        )
        backup = client.backup_create(BackupCreateOptions(label="nightly", allow_inconsistent=False))
        assert backup.id.endswith("_nightly")
        assert backup.number_of_db_servers == 3
        assert backup.creation_time == "2024-01-01"
        assert fake_arango.body(fake_arango.last_request) == {"label": "nightly", "allowInconsistent": False}

    def test_list(self, fake_arango, client) -> None:
        fake_arango.add(
            "POST",
            "/_admin/backup/list",
            json={"result": {"list": {"b1": {"id": "b1", "available": True, "nrPiecesPresent": 3}}}},
        )
        backups = client.backup_list("b1")
        assert backups["b1"].available
        assert backups["b1"].number_of_pieces_present == 3
        assert fake_arango.body(fake_arango.last_request) == {"id": "b1"}

    def test_delete_and_restore(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/backup/delete", json={"result": {}})
        fake_arango.add("POST", "/_admin/backup/restore", json={"result": {"previous": "FAILSAFE"}})
        client.backup_delete("b1")
        assert client.backup_restore("b1").previous == "FAILSAFE"

    @pytest.mark.parametrize("method", ["backup_delete", "backup_restore"])
    def test_id_required(self, client, method) -> None:
        with pytest.raises(InvalidArgumentError):
            getattr(client, method)("")


class TestTransfers:
    """Tests for uploads, downloads and their monitors."""

    def test_upload_returns_monitor(self, fake_arango, client) -> None:
        fake_arango.add("POST", "/_admin/backup/upload", status=202, json={"result": {"uploadId": "u1"}})
        monitor = client.backup_upload("b1", REPO, RCLONE)
        assert monitor.job_id == "u1"
        assert monitor.transfer_type == TransferType.UPLOAD
        assert fake_arango.body(fake_arango.last_request) == {"id": "b1", "remoteRepository": REPO, "config": RCLONE}

    def test_download_progress_and_abort(self, fake_arango, client) -> None:
        path = "/_admin/backup/download"
        fake_arango.add("POST", path, status=202, json={"result": {"downloadId": "d1"}})
        fake_arango.add("POST", path, json={"result": {"BackupId": "b1", "DBServers": {"PRMR-1": {"Status": "STARTED"}}}})
        fake_arango.add("POST", path, status=202, json={"result": {}})

        monitor = client.backup_download("b1", REPO, RCLONE)
        assert not monitor.progress().is_finished()
        assert fake_arango.body(fake_arango.last_request) == {"downloadId": "d1"}
        monitor.abort()
        assert fake_arango.body(fake_arango.last_request) == {"downloadId": "d1", "abort": True}

    def test_monitor_requires_job_id(self, client) -> None:
        with pytest.raises(InvalidArgumentError):
            client.transfer_monitor("", "upload")
        with pytest.raises(ValueError):
            client.transfer_monitor("j1", "sideways")

    def test_is_finished(self) -> None:
        progress = BackupTransferProgress.model_validate(
            {"DBServers": {"a": {"Status": "COMPLETED"}, "b": {"Status": "FAILED"}}}
        )
        assert progress.is_finished()
        assert not BackupTransferProgress().is_finished()

    def test_repr(self, client) -> None:
        assert repr(TransferMonitor(client.connection, "u1", TransferType.UPLOAD)) == "<TransferMonitor upload u1>"
