"""Users and their database and collection permissions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, new_url
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found

if TYPE_CHECKING:
    from arangodriver.arangodb.client import ArangoClient


class Grant(str, Enum):
    READ_WRITE = "rw"
    READ_ONLY = "ro"
    NONE = "none"
    UNDEFINED = "undefined"


class UserOptions(ArangoModel):
    password: str | None = Field(default=None, alias="passwd")
    active: bool | None = None
    extra: dict[str, Any] | None = None


class UserInfo(ArangoModel):
    user: str
    active: bool = False
    extra: dict[str, Any] | None = None
    change_password: bool | None = None


class DatabasePermissions(ArangoModel):
    permission: Grant = Grant.UNDEFINED
    collections: dict[str, Grant] = Field(default_factory=dict)


class User(ApiBase):
    """A user account on the server."""

    def __init__(self, client: ArangoClient, info: UserInfo) -> None:
        self._client = client
        self.info = info
        self._connection = client.connection

    def __repr__(self) -> str:
        return f"<User {self.name}>"

    @property
    def name(self) -> str:
        return self.info.user

    @property
    def is_active(self) -> bool:
        return self.info.active

    @property
    def extra(self) -> dict[str, Any]:
        return self.info.extra or {}

    def _user_url(self, *parts: str) -> str:
        return new_url("_api", "user", escape(self.name), *parts)

    def accessible_databases(self) -> dict[str, Grant]:
        """Database names mapped to this user's access level."""
        data = self._get(self._user_url("database")).expect(200) or {}
        return {db: Grant(grant) for db, grant in (data.get("result") or {}).items()}

    def accessible_databases_full(self) -> dict[str, DatabasePermissions]:
        """Database access including per-collection grants."""
        data = self._get(self._user_url("database"), optional_query("full", True)).expect(200) or {}
        return {db: DatabasePermissions.model_validate(p) for db, p in (data.get("result") or {}).items()}

    def database_access(self, db: str) -> Grant:
        data = self._get(self._user_url("database", escape(db))).expect(200) or {}
        return Grant(data.get("result", Grant.UNDEFINED.value))

    def collection_access(self, db: str, collection: str) -> Grant:
        data = self._get(self._user_url("database", escape(db), escape(collection))).expect(200) or {}
        return Grant(data.get("result", Grant.UNDEFINED.value))

    def set_database_access(self, db: str, grant: Grant | str) -> None:
        """Grant access to ``db``; ``*`` sets the default for all databases."""
        body = {"grant": Grant(grant).value}
        self._put(self._user_url("database", escape(db)), body).check_status(200)

    def set_collection_access(self, db: str, collection: str, grant: Grant | str) -> None:
        body = {"grant": Grant(grant).value}
        self._put(self._user_url("database", escape(db), escape(collection)), body).check_status(200)

    def remove_database_access(self, db: str) -> None:
        self._delete(self._user_url("database", escape(db))).check_status(202)

    def remove_collection_access(self, db: str, collection: str) -> None:
        self._delete(self._user_url("database", escape(db), escape(collection))).check_status(202)


class ClientUsers(ApiBase):
    """User management, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def user(self, name: str) -> User:
        if not name:
            raise InvalidArgumentError("user name is empty")
        data = self._get(new_url("_api", "user", escape(name))).expect(200)
        return User(self, UserInfo.model_validate(data))  # type: ignore[arg-type]

    def user_exists(self, name: str) -> bool:
        try:
            self.user(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def users(self) -> list[User]:
        data = self._get(new_url("_api", "user")).expect(200) or {}
        return [User(self, UserInfo.model_validate(u)) for u in data.get("result") or []]  # type: ignore[arg-type]

    def create_user(self, name: str, options: UserOptions | dict[str, Any] | None = None) -> User:
        if not name:
            raise InvalidArgumentError("user name is empty")
        body = {**dump_options(options), "user": name}
        data = self._post(new_url("_api", "user"), body).expect(201)
        return User(self, UserInfo.model_validate(data))  # type: ignore[arg-type]

    def replace_user(self, name: str, options: UserOptions | dict[str, Any]) -> User:
        data = self._put(new_url("_api", "user", escape(name)), dump_options(options)).expect(200)
        return User(self, UserInfo.model_validate(data))  # type: ignore[arg-type]

    def update_user(self, name: str, options: UserOptions | dict[str, Any]) -> User:
        data = self._patch(new_url("_api", "user", escape(name)), dump_options(options)).expect(200)
        return User(self, UserInfo.model_validate(data))  # type: ignore[arg-type]

    def remove_user(self, name: str) -> None:
        self._delete(new_url("_api", "user", escape(name))).check_status(202)


__all__ = ["ClientUsers", "DatabasePermissions", "Grant", "User", "UserInfo", "UserOptions"]
