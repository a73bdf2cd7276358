"""Hot backups and their transfer to and from remote repositories."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_pascal

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import call_post, new_url
from arangodriver.errors import InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.connection.base import Connection


class BackupCreateOptions(ArangoModel):
    label: str | None = None
    timeout: int | None = None
    allow_inconsistent: bool | None = None
    force: bool | None = None


class BackupResponse(ArangoModel):
    id: str
    potentially_inconsistent: bool | None = None
    number_of_files: int | None = Field(default=None, alias="nrFiles")
    number_of_db_servers: int | None = Field(default=None, alias="nrDBServers")
    size_in_bytes: int | None = None
    creation_time: str | None = Field(default=None, alias="datetime")


class BackupMeta(BackupResponse):
    version: str | None = None
    available: bool | None = None
    number_of_pieces_present: int | None = Field(default=None, alias="nrPiecesPresent")
    keys: list[dict[str, Any]] | None = None


class BackupList(ArangoModel):
    server: str | None = None
    backups: dict[str, BackupMeta] = Field(default_factory=dict, alias="list")


class BackupRestoreResponse(ArangoModel):
    previous: str | None = None


class TransferType(str, Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"


class BackupTransferStatus(str, Enum):
    ACKNOWLEDGED = "ACK"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class BackupTransferReport(ArangoModel):
    model_config = ConfigDict(alias_generator=to_pascal)

    status: str | None = None
    error: int | None = None
    error_message: str | None = None
    progress: dict[str, Any] | None = None


class BackupTransferProgress(ArangoModel):
    model_config = ConfigDict(alias_generator=to_pascal)

    backup_id: str | None = Field(default=None, alias="BackupId")
    cancelled: bool | None = None
    timestamp: str | None = None
    db_servers: dict[str, BackupTransferReport] = Field(default_factory=dict, alias="DBServers")

    def is_finished(self) -> bool:
        """True once every DB-Server completed, failed or was cancelled."""
        terminal = {
            BackupTransferStatus.COMPLETED.value,
            BackupTransferStatus.FAILED.value,
            BackupTransferStatus.CANCELLED.value,
        }
        return bool(self.db_servers) and all(r.status in terminal for r in self.db_servers.values())


class TransferMonitor:
    """Follows one upload or download job."""

    def __init__(self, connection: Connection, job_id: str, transfer_type: TransferType) -> None:
        if not job_id:
            raise InvalidArgumentError("transfer job id is empty")
        self._connection = connection
        self.job_id = job_id
        self.transfer_type = TransferType(transfer_type)

    def __repr__(self) -> str:
        return f"<TransferMonitor {self.transfer_type.value} {self.job_id}>"

    @property
    def _id_key(self) -> str:
        return f"{self.transfer_type.value}Id"

    def _url(self) -> str:
        return new_url("_admin", "backup", self.transfer_type.value)

    def progress(self) -> BackupTransferProgress:
        response = call_post(self._connection, self._url(), {self._id_key: self.job_id})
        data = response.expect(200) or {}
        return BackupTransferProgress.model_validate(data.get("result") or {})

    def abort(self) -> None:
        response = call_post(self._connection, self._url(), {self._id_key: self.job_id, "abort": True})
        response.check_status(202)


class ClientBackup(ApiBase):
    """Hot backup calls, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def backup_create(self, options: BackupCreateOptions | dict[str, Any] | None = None) -> BackupResponse:
        response = self._post(new_url("_admin", "backup", "create"), dump_options(options))
        return BackupResponse.model_validate((response.expect(201) or {}).get("result") or {})

    def backup_list(self, backup_id: str | None = None) -> dict[str, BackupMeta]:
        """Local backups keyed by ID, optionally only the one with ``backup_id``."""
        body = {"id": backup_id} if backup_id else {}
        data = self._post(new_url("_admin", "backup", "list"), body).expect(200) or {}
        return BackupList.model_validate(data.get("result") or {}).backups

    def backup_delete(self, backup_id: str) -> None:
        if not backup_id:
            raise InvalidArgumentError("backup id is empty")
        self._post(new_url("_admin", "backup", "delete"), {"id": backup_id}).check_status(200)

    def backup_restore(self, backup_id: str) -> BackupRestoreResponse:
        if not backup_id:
            raise InvalidArgumentError("backup id is empty")
        data = self._post(new_url("_admin", "backup", "restore"), {"id": backup_id}).expect(200) or {}
        return BackupRestoreResponse.model_validate(data.get("result") or {})

    def _backup_transfer(
        self, transfer_type: TransferType, backup_id: str, remote_repository: str, config: dict[str, Any]
    ) -> TransferMonitor:
        body = {"id": backup_id, "remoteRepository": remote_repository, "config": config}
        response = self._post(new_url("_admin", "backup", transfer_type.value), body)
        result = (response.expect(202) or {}).get("result") or {}
        return TransferMonitor(self._connection, result.get(f"{transfer_type.value}Id", ""), transfer_type)

    def backup_upload(self, backup_id: str, remote_repository: str, config: dict[str, Any]) -> TransferMonitor:
        """Start uploading a backup; ``config`` is the rclone configuration of the repository."""
        return self._backup_transfer(TransferType.UPLOAD, backup_id, remote_repository, config)

    def backup_download(self, backup_id: str, remote_repository: str, config: dict[str, Any]) -> TransferMonitor:
        return self._backup_transfer(TransferType.DOWNLOAD, backup_id, remote_repository, config)

    def transfer_monitor(self, job_id: str, transfer_type: TransferType | str) -> TransferMonitor:
        return TransferMonitor(self._connection, job_id, TransferType(transfer_type))


__all__ = [
    "BackupCreateOptions",
    "BackupList",
    "BackupMeta",
    "BackupResponse",
    "BackupRestoreResponse",
    "BackupTransferProgress",
    "BackupTransferReport",
    "BackupTransferStatus",
    "ClientBackup",
    "TransferMonitor",
    "TransferType",
]
