import pytest

from sysutilkit.sql_database import SqlDatabase, SqlDatabasePool, SqlDatabaseType


class FakeDatabase(SqlDatabase):
    def __init__(self, db_type):
        self._type = db_type

    def type(self):
        return self._type

    def prepare(self, sql, buffer_size, stay_in_pool=True, stored_proc_returns_dataset=False):
        return True

    def flush_buffer(self):
        return True

    def commit(self):
        return True

    def rollback(self):
        return True

    def is_eof(self):
        return 1

    def last_error(self):
        return ""

    def bind(self, value):
        return self

    def read(self):
        return None


class CountingFactory:
    def __init__(self, db_type):
        self.db_type = db_type
        self.created = 0

    def __call__(self):
        self.created += 1
        return FakeDatabase(self.db_type)


def test_type_values_match_declaration_order():
    assert SqlDatabaseType(0) is SqlDatabaseType.ODBC
    assert SqlDatabaseType(1) is SqlDatabaseType.OCI
    assert list(SqlDatabaseType) == [SqlDatabaseType.ODBC, SqlDatabaseType.OCI]
    with pytest.raises(ValueError):
        SqlDatabaseType(2)


def test_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        SqlDatabase()


def test_get_returns_database_of_requested_type():
    factory = CountingFactory(SqlDatabaseType.ODBC)
    pool = SqlDatabasePool({SqlDatabaseType.ODBC: factory})
    pool.add(SqlDatabaseType.ODBC, 2)
    borrowed = pool.get(SqlDatabaseType.ODBC)
    assert borrowed.obj.type() is SqlDatabaseType.ODBC
    assert factory.created == 2


def test_get_unknown_type_returns_none():
    pool = SqlDatabasePool({SqlDatabaseType.ODBC: CountingFactory(SqlDatabaseType.ODBC)})
    pool.add(SqlDatabaseType.ODBC, 1)
    assert pool.get(SqlDatabaseType.OCI) is None


def test_get_matches_type_exactly():
    pool = SqlDatabasePool({SqlDatabaseType.OCI: CountingFactory(SqlDatabaseType.OCI)})
    pool.add(SqlDatabaseType.OCI, 1)
    assert pool.get(SqlDatabaseType.ODBC) is None
    assert pool.get(SqlDatabaseType.OCI).obj.type() is SqlDatabaseType.OCI


def test_released_database_is_reused():
    factory = CountingFactory(SqlDatabaseType.ODBC)
    pool = SqlDatabasePool({SqlDatabaseType.ODBC: factory})
    pool.add(SqlDatabaseType.ODBC, 1)
    first = pool.get(SqlDatabaseType.ODBC)
    first.release()
    second = pool.get(SqlDatabaseType.ODBC)
    assert second.obj is first.obj
    assert factory.created == 1


def test_pool_grows_by_allocated_count_when_empty():
    factory = CountingFactory(SqlDatabaseType.ODBC)
    pool = SqlDatabasePool({SqlDatabaseType.ODBC: factory})
    pool.add(SqlDatabaseType.ODBC, 2)
    borrowed = [pool.get(SqlDatabaseType.ODBC) for _ in range(3)]
    assert all(item is not None for item in borrowed)
    assert len({id(item.obj) for item in borrowed}) == 3
    assert factory.created == 4


def test_add_without_factory_raises():
    pool = SqlDatabasePool({})
    with pytest.raises(LookupError):
        pool.add(SqlDatabaseType.OCI, 1)


def test_context_manager_returns_database_to_pool():
    factory = CountingFactory(SqlDatabaseType.ODBC)
    pool = SqlDatabasePool({SqlDatabaseType.ODBC: factory})
    pool.add(SqlDatabaseType.ODBC, 1)
    with pool.get(SqlDatabaseType.ODBC) as database:
        held = database
    assert pool.get(SqlDatabaseType.ODBC).obj is held


def test_shared_instance_is_reused_until_destroyed():
    first = SqlDatabasePool.instance()
    assert SqlDatabasePool.instance() is first
    SqlDatabasePool.destroy()
    second = SqlDatabasePool.instance()
    assert second is not first
    SqlDatabasePool.destroy()
    assert isinstance(second, SqlDatabasePool)