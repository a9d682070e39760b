from face_attendance.database.bootstrap import list_tables


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    def execute(self, sql):
        self.executed.append(sql)

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, rows):
        self.cursor = FakeCursor(rows)
        self.conn = FakeConnection(self.cursor)

    def connect(self, *, with_database=True):
        return self.conn


def test_list_tables_reads_first_column():
    factory = FakeConnectionFactory([("kv_store",), ("other",)])

    assert list_tables(factory) == ["kv_store", "other"]
    assert factory.cursor.executed == ["SHOW TABLES"]
    assert factory.conn.committed and factory.conn.closed


def test_list_tables_empty_database():
    assert list_tables(FakeConnectionFactory([])) == []
