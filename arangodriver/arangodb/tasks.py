"""Server side JavaScript tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import PrivateAttr

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import call_delete, escape, new_url
from arangodriver.errors import ArangoClientError, InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.connection.base import Connection


class TaskOptions(ArangoModel):
    name: str | None = None
    command: str
    params: Any = None
    period: int | None = None
    offset: int | None = None


class Task(ArangoModel):
    id: str
    name: str | None = None
    type: str | None = None  # "periodic" or "timed"
    period: int | None = None
    offset: float | None = None
    created: float | None = None
    command: str | None = None
    database: str | None = None

    _connection: Any = PrivateAttr(default=None)

    def bind(self, connection: Connection) -> Task:
        self._connection = connection
        return self

    def remove(self) -> None:
        if self._connection is None:
            raise ArangoClientError("task is not bound to a connection")
        url = new_url("_db", escape(self.database or "_system"), "_api", "tasks", escape(self.id))
        call_delete(self._connection, url).check_status(200)


class ClientTasks(ApiBase):
    """Task management, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def _tasks_url(self, db: str, *parts: str) -> str:
        return new_url("_db", escape(db), "_api", "tasks", *parts)

    def _task(self, data: Any, db: str) -> Task:
        task = Task.model_validate(data)
        if not task.database:
            task.database = db
        return task.bind(self._connection)

    def tasks(self, db: str = "_system") -> list[Task]:
        data = self._get(self._tasks_url(db)).expect(200) or []
        return [self._task(t, db) for t in data]

    def task(self, task_id: str, db: str = "_system") -> Task:
        return self._task(self._get(self._tasks_url(db, escape(task_id))).expect(200), db)

    def create_task(self, options: TaskOptions | dict[str, Any], db: str = "_system") -> Task:
        """Register a task; the server assigns its ID."""
        body = dump_options(options)
        if not body.get("command"):
            raise InvalidArgumentError("task command is empty")
        return self._task(self._post(self._tasks_url(db), body).expect(200), db)

    def create_task_with_id(self, task_id: str, options: TaskOptions | dict[str, Any], db: str = "_system") -> Task:
        if not task_id:
            raise InvalidArgumentError("task id is empty")
        body = dump_options(options)
        return self._task(self._put(self._tasks_url(db, escape(task_id)), body).expect(200), db)

    def remove_task(self, task_id: str, db: str = "_system") -> None:
        self._delete(self._tasks_url(db, escape(task_id))).check_status(200)


__all__ = ["ClientTasks", "Task", "TaskOptions"]
