"""Table-oriented data access used by the standings engine and result services.

Records travel as plain dicts keyed by the stored column names
(``leagueID``, ``homeTeam``, ``pointsFor`` ...). Every call returns a
``DataStoreResult``; adapters report failures through ``status``/``error``
instead of raising.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from colts_league.leagues.models.leagues_models import League
from colts_league.teams.models.team_model import Team
from colts_league.fixtures.models.fixture_model import Fixture
from colts_league.results.models.result_model import Result
from colts_league.standings.models.standings_model import Standing

logger = logging.getLogger(__name__)

LEAGUES = "leagues"
TEAMS = "teams"
FIXTURES = "fixtures"
RESULTS = "results"
STANDINGS = "standings"


class DataStoreResult(BaseModel):
    status: int = 200
    records: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    @classmethod
    def failure(cls, status: int, error: str) -> "DataStoreResult":
        return cls(status=status, error=error)


class DataStore(ABC):
    @abstractmethod
    async def read(
        self,
        table: str,
        filter: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> DataStoreResult: ...

    @abstractmethod
    async def create(self, table: str, record: Dict[str, Any]) -> DataStoreResult: ...

    @abstractmethod
    async def update(
        self, table: str, record: Dict[str, Any], match_filter: Dict[str, Any]
    ) -> DataStoreResult: ...


class SqlAlchemyDataStore(DataStore):
    # table name -> (model, id prefix)
    TABLES = {
        LEAGUES: (League, "L"),
        TEAMS: (Team, "T"),
        FIXTURES: (Fixture, "F"),
        RESULTS: (Result, "R"),
        STANDINGS: (Standing, "ST"),
    }

    def __init__(self, db: Session):
        self.db = db

    async def read(self, table, filter=None, order_by=None):
        """Return every row of ``table`` matching the equality ``filter``."""
        try:
            model = self._model(table)
            query = self.db.query(model)
            for field, value in (filter or {}).items():
                query = query.filter(self._attribute(model, field) == value)
            if order_by:
                column = self._attribute(model, order_by.lstrip("-"))
                query = query.order_by(column.desc() if order_by.startswith("-") else column.asc())
            return DataStoreResult(records=[self._to_record(row) for row in query.all()])
        except ValueError as e:
            return DataStoreResult.failure(400, str(e))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to read {table}: {e}")
            return DataStoreResult.failure(500, f"Database error reading {table}")

    async def create(self, table, record):
        """Insert one row, generating an id when the record has none."""
        try:
            model = self._model(table)
            values = self._to_attributes(model, record)
            if not values.get("id"):
                values["id"] = self._next_id(model, self.TABLES[table][1])

            row = model(**values)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return DataStoreResult(records=[self._to_record(row)])
        except ValueError as e:
            return DataStoreResult.failure(400, str(e))
        except SQLAlchemyError as e:
            self.db.rollback()  # rollback to prevent dirty session
            logger.error(f"❌ Failed to create {table} record: {e}")
            return DataStoreResult.failure(500, f"Database error creating {table} record")

    async def update(self, table, record, match_filter):
        """Apply ``record`` to every row matching ``match_filter``."""
        try:
            model = self._model(table)
            values = self._to_attributes(model, record)
            values.pop("id", None)
            if not match_filter:
                raise ValueError("Update requires a match filter")

            query = self.db.query(model)
            for field, value in match_filter.items():
                query = query.filter(self._attribute(model, field) == value)
            rows = query.all()
            if not rows:
                return DataStoreResult.failure(404, f"No {table} record matches {match_filter}")

            for row in rows:
                for key, value in values.items():
                    setattr(row, key, value)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
            return DataStoreResult(records=[self._to_record(row) for row in rows])
        except ValueError as e:
            return DataStoreResult.failure(400, str(e))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update {table} record: {e}")
            return DataStoreResult.failure(500, f"Database error updating {table} record")

    def _next_id(self, model, prefix: str) -> str:
        """Human-readable id (L1, ST12 ...) seeded from the row count, skipping ids already taken."""
        next_number = self.db.query(func.count()).select_from(model).scalar() + 1
        while self.db.get(model, f"{prefix}{next_number}") is not None:
            next_number += 1
        return f"{prefix}{next_number}"

    def _model(self, table: str):
        if table not in self.TABLES:
            raise ValueError(f"Unknown table: {table}")
        return self.TABLES[table][0]

    @staticmethod
    def _columns(model) -> Dict[str, str]:
        """Map stored column name -> mapped attribute name."""
        return {attr.columns[0].name: attr.key for attr in inspect(model).column_attrs}

    def _attribute(self, model, field: str):
        columns = self._columns(model)
        if field not in columns:
            raise ValueError(f"Unknown field for {model.__tablename__}: {field}")
        return getattr(model, columns[field])

    def _to_attributes(self, model, record: Dict[str, Any]) -> Dict[str, Any]:
        columns = self._columns(model)
        unknown = [field for field in record if field not in columns]
        if unknown:
            raise ValueError(f"Unknown field(s) for {model.__tablename__}: {', '.join(unknown)}")
        return {columns[field]: value for field, value in record.items()}

    def _to_record(self, row) -> Dict[str, Any]:
        return {name: getattr(row, key) for name, key in self._columns(type(row)).items()}
