"""ArangoSearch analyzers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape
from arangodriver.errors import InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Database


class AnalyzerDefinition(ArangoModel):
    """Name, type, properties and features of an analyzer.

    Names returned by the server are qualified with the database
    (``db::name``) unless the analyzer is built in.
    """

    name: str
    type: str | None = None
    properties: dict[str, Any] | None = None
    features: list[str] = Field(default_factory=list)


class Analyzer(ApiBase):
    def __init__(self, db: Database, definition: AnalyzerDefinition) -> None:
        self._db = db
        self.definition = definition
        self._connection = db.connection
        self._modifiers = db._modifiers
        self._db_name = db.name

    def __repr__(self) -> str:
        return f"<Analyzer {self.name}>"

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def type(self) -> str | None:
        return self.definition.type

    @property
    def properties(self) -> dict[str, Any]:
        return self.definition.properties or {}

    @property
    def features(self) -> list[str]:
        return self.definition.features

    def remove(self, force: bool = False) -> None:
        """Delete the analyzer; ``force`` removes it even while views use it."""
        response = self._delete(
            self._url("_api", "analyzer", escape(self.name)), optional_query("force", True if force else None)
        )
        response.check_status(200)


class DatabaseAnalyzers(ApiBase):
    """Analyzer management, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def analyzer(self, name: str) -> Analyzer:
        data = self._get(self._url("_api", "analyzer", escape(name))).expect(200) or {}
        return Analyzer(self, AnalyzerDefinition.model_validate(data))  # type: ignore[arg-type]

    def analyzers(self) -> list[Analyzer]:
        data = self._get(self._url("_api", "analyzer")).expect(200) or {}
        return [
            Analyzer(self, AnalyzerDefinition.model_validate(a))  # type: ignore[arg-type]
            for a in data.get("result") or []
        ]

    def ensure_analyzer(self, definition: AnalyzerDefinition | dict[str, Any]) -> tuple[bool, Analyzer]:
        """Create an analyzer unless an identical one exists.

        Returns ``(existed, analyzer)``. The server answers 200 for an
        identical existing analyzer and 201 for a new one; a different
        analyzer with the same name is a conflict error.
        """
        body = dump_options(definition)
        if not body.get("name"):
            raise InvalidArgumentError("analyzer name is empty")
        response = self._post(self._url("_api", "analyzer"), body)
        data = response.expect(200, 201) or {}
        return response.code == 200, Analyzer(self, AnalyzerDefinition.model_validate(data))  # type: ignore[arg-type]


__all__ = ["Analyzer", "AnalyzerDefinition", "DatabaseAnalyzers"]
