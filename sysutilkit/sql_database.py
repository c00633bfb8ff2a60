"""Common SQL database interface and a pool of database connections keyed by type."""

from __future__ import annotations

import abc
import enum
import operator
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

from sysutilkit.object_pool import ObjectPool, PooledObject


class SqlDatabaseType(enum.Enum):
    """Kinds of database access layers."""

    ODBC = 0
    OCI = 1


class SqlDatabase(abc.ABC):
    """A database connection with one prepared statement at a time.

    ``prepare``, ``flush_buffer``, ``commit`` and ``rollback`` report failure
    by returning False and recording the reason in :meth:`last_error`;
    ``bind`` and ``read`` raise.
    """

    @abc.abstractmethod
    def type(self) -> SqlDatabaseType:
        """Return the kind of this database."""

    @abc.abstractmethod
    def prepare(
        self,
        sql: str,
        buffer_size: int,
        stay_in_pool: bool = True,
        stored_proc_returns_dataset: bool = False,
    ) -> bool:
        """Prepare ``sql``, buffering up to ``buffer_size`` parameter rows."""

    @abc.abstractmethod
    def flush_buffer(self) -> bool:
        """Execute the statement with the buffered parameter rows."""

    @abc.abstractmethod
    def commit(self) -> bool:
        """Commit the current transaction."""

    @abc.abstractmethod
    def rollback(self) -> bool:
        """Roll back the current transaction."""

    @abc.abstractmethod
    def is_eof(self) -> int:
        """Return 1 when no result value is left, 0 when one is, -1 on error."""

    @abc.abstractmethod
    def last_error(self) -> str:
        """Return the description of the most recent error."""

    @abc.abstractmethod
    def bind(self, value: Any) -> "SqlDatabase":
        """Bind the next parameter value; return self for chaining."""

    @abc.abstractmethod
    def read(self) -> Any:
        """Return the next value of the result set."""


def _database_key(database: SqlDatabase) -> SqlDatabaseType:
    return database.type()


class SqlDatabasePool(ObjectPool):
    """Pool of database connections, grouped by exact database type.

    ``factories`` maps each database type to a callable that opens a new
    connection of that type.
    """

    logger_name: ClassVar[str] = "SqlDatabasePool"

    def __init__(
        self,
        factories: Optional[Mapping[SqlDatabaseType, Callable[[], SqlDatabase]]] = None,
    ) -> None:
        self._factories: Dict[SqlDatabaseType, Callable[[], SqlDatabase]] = dict(factories or {})
        super().__init__(
            create=self._create_database,
            key_of=_database_key,
            find_pred=operator.eq,
            get_pred=operator.eq,
        )

    def _create_database(self, db_type: SqlDatabaseType) -> SqlDatabase:
        factory = self._factories.get(db_type)
        if factory is None:
            raise LookupError(f"no database factory for {db_type!r}")
        return factory()

    def add(self, db_type: SqlDatabaseType, count: int) -> None:
        """Open ``count`` connections of ``db_type`` and put them in the pool."""
        super().add(db_type, count)

    def get(self, db_type: SqlDatabaseType) -> Optional[PooledObject]:
        """Borrow a connection of exactly ``db_type``; None if none can be had."""
        return super().get(db_type)