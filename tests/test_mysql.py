from datetime import datetime, timezone
from unittest import mock

import pymysql
import pytest

from stockroom.item import Item, RepositoryError
from stockroom.mysql import (
    MySQLClient,
    MySQLClientConfig,
    MySQLClientError,
    MySQLRepository,
    default_client,
)

PASSWORD = "password"


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def execute(self, query, params=None):
        if self.connection.error is not None:
            raise self.connection.error
        self.connection.executed.append((query, params))

    def fetchall(self):
        return list(self.connection.rows)


class FakeConnection:
    def __init__(self, rows=(), error=None, ping_error=None):
        self.rows = rows
        self.error = error
        self.ping_error = ping_error
        self.executed = []
        self.commits = 0
        self.pings = 0
        self.closed = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def ping(self):
        self.pings += 1
        if self.ping_error is not None:
            raise self.ping_error

    def close(self):
        self.closed += 1


def make_config():
    password = PASSWORD
    return MySQLClientConfig(
        user="api_user", password=password, host="mysql", port="3306", database="inventory"
    )


def test_dsn_format():
    assert make_config().dsn() == (
        "api_user:password@tcp(mysql:3306)/inventory"
        "?charset=utf8mb4&parseTime=True&loc=Local"
    )


def test_client_connects_and_pings():
    conn = FakeConnection()
    seen = []

    def opener(config):
        seen.append(config)
        return conn

    client = MySQLClient(make_config(), opener)
    assert client.connection is conn
    assert conn.pings == 1
    assert seen == [make_config()]


def test_client_connect_failure():
    def opener(config):
        raise OSError("refused")

    with pytest.raises(MySQLClientError) as info:
        MySQLClient(make_config(), opener)
    assert str(info.value).startswith(
        "falha ao inicializar o MySQLClient: falha ao conectar ao MySQL"
    )
    assert "refused" in str(info.value)


def test_client_ping_failure_closes_connection():
    conn = FakeConnection(ping_error=OSError("down"))
    with pytest.raises(MySQLClientError) as info:
        MySQLClient(make_config(), lambda config: conn)
    assert "falha ao verificar conexão com MySQL" in str(info.value)
    assert conn.closed == 1


def test_close_is_idempotent():
    conn = FakeConnection()
    client = MySQLClient(make_config(), lambda config: conn)
    client.close()
    client.close()
    assert conn.closed == 1
    assert client.connection is None


def test_context_manager_closes():
    conn = FakeConnection()
    with MySQLClient(make_config(), lambda config: conn) as client:
        assert client.connection is conn
    assert conn.closed == 1


def test_default_client_settings():
    conn = FakeConnection()
    with mock.patch.object(pymysql, "connect", return_value=conn) as connect:
        client = default_client()
    assert client.connection is conn
    kwargs = connect.call_args.kwargs
    assert kwargs["host"] == "mysql"
    assert kwargs["port"] == 3306
    assert kwargs["user"] == "api_user"
    assert kwargs["database"] == "inventory"
    assert kwargs["charset"] == "utf8mb4"


def sample_item():
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    return Item(
        id=7, code="ABC123", title="Notebook", description="Notebook Dell",
        price=3500.5, stock=10, status="disponível",
        created_at=stamp, updated_at=stamp,
    )


def test_save_item_inserts_and_commits():
    conn = FakeConnection()
    repo = MySQLRepository(conn)
    item = sample_item()
    repo.save_item(item)
    assert conn.commits == 1
    query, params = conn.executed[0]
    assert "INSERT INTO items" in query
    assert params[:6] == ("ABC123", "Notebook", "Notebook Dell", 3500.5, 10, "disponível")
    assert params[6].tzinfo is None
    assert params[7].tzinfo is None


def test_save_then_list_round_trip():
    conn = FakeConnection()
    repo = MySQLRepository(conn)
    item = sample_item()
    repo.save_item(item)
    params = conn.executed[0][1]
    conn.rows = [(item.id,) + params]
    listed = repo.list_items()
    assert list(listed) == [7]
    assert listed[7] == item
    assert listed[7].created_at.tzinfo is not None


def test_list_items_empty():
    repo = MySQLRepository(FakeConnection(rows=[]))
    assert repo.list_items() == {}


def test_update_item_params_end_with_id():
    conn = FakeConnection()
    repo = MySQLRepository(conn)
    repo.update_item(sample_item())
    query, params = conn.executed[0]
    assert query.startswith("UPDATE items SET")
    assert params[-1] == 7
    assert params[:6] == ("ABC123", "Notebook", "Notebook Dell", 3500.5, 10, "disponível")
    assert len(params) == 8


def test_delete_item():
    conn = FakeConnection()
    MySQLRepository(conn).delete_item(7)
    assert conn.executed == [("DELETE FROM items WHERE id=%s", (7,))]
    assert conn.commits == 1


@pytest.mark.parametrize("call", [
    lambda repo: repo.save_item(sample_item()),
    lambda repo: repo.list_items(),
    lambda repo: repo.update_item(sample_item()),
    lambda repo: repo.delete_item(7),
])
def test_database_errors_become_repository_errors(call):
    conn = FakeConnection(error=pymysql.err.OperationalError(2013, "lost connection"))
    with pytest.raises(RepositoryError) as info:
        call(MySQLRepository(conn))
    assert "lost connection" in str(info.value)
    assert conn.commits == 0