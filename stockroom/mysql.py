"""MySQL connection handling and the MySQL-backed item repository."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import pymysql

from stockroom.item import ZERO_TIME, Item, ItemRepositoryPort, RepositoryError

PASSWORD = "password"
"""Password the default client configuration uses."""

_INSERT = (
    "INSERT INTO items "
    "(code, title, description, price, stock, status, created_at, updated_at) "
    "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)"
)
_SELECT = (
    "SELECT id, code, title, description, price, stock, status, created_at, updated_at "
    "FROM items"
)
_UPDATE = (
    "UPDATE items SET "
    "code=%s, title=%s, description=%s, price=%s, stock=%s, status=%s, updated_at=%s "
    "WHERE id=%s"
)
_DELETE = "DELETE FROM items WHERE id=%s"


class MySQLClientError(Exception):
    """The MySQL client could not be set up."""


@dataclass(frozen=True)
class MySQLClientConfig:
    """Settings needed to reach a MySQL database."""

    user: str
    password: str
    host: str
    port: str
    database: str

    def dsn(self) -> str:
        """Return the data source name describing this configuration."""
        return (
            f"{self.user}:{self.password}@tcp({self.host}:{self.port})/{self.database}"
            "?charset=utf8mb4&parseTime=True&loc=Local"
        )


def _pymysql_connect(config: MySQLClientConfig) -> Any:
    return pymysql.connect(
        host=config.host,
        port=int(config.port),
        user=config.user,
        password=config.password,
        database=config.database,
        charset="utf8mb4",
        autocommit=True,
    )


class MySQLClient:
    """An open, verified connection to a MySQL database."""

    def __init__(
        self,
        config: MySQLClientConfig,
        connect: Optional[Callable[[MySQLClientConfig], Any]] = None,
    ) -> None:
        self.config = config
        opener = connect if connect is not None else _pymysql_connect
        try:
            connection = opener(config)
        except Exception as exc:
            raise MySQLClientError(
                f"falha ao inicializar o MySQLClient: falha ao conectar ao MySQL: {exc}"
            ) from exc
        try:
            connection.ping()
        except Exception as exc:
            connection.close()
            raise MySQLClientError(
                "falha ao inicializar o MySQLClient: "
                f"falha ao verificar conexão com MySQL: {exc}"
            ) from exc
        self._connection: Any = connection

    @property
    def connection(self) -> Any:
        """The live DB-API connection, or None once closed."""
        return self._connection

    def close(self) -> None:
        """Close the connection if it is still open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "MySQLClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def default_client() -> MySQLClient:
    """Connect to the inventory database with the standard settings."""
    config = MySQLClientConfig(
        user="api_user",
        password=PASSWORD,
        host="mysql",
        port="3306",
        database="inventory",
    )
    return MySQLClient(config)


def _to_db_time(value: datetime) -> datetime:
    """Express a timestamp as naive local time, as the database stores it."""
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone().replace(tzinfo=None)
    except (OverflowError, ValueError):
        return value.replace(tzinfo=None)


def _from_db_time(value: Any) -> datetime:
    """Read a stored naive local timestamp back as an aware datetime."""
    if not isinstance(value, datetime):
        return ZERO_TIME
    if value.tzinfo is not None:
        return value
    try:
        return value.astimezone()
    except (OverflowError, ValueError):
        return value.replace(tzinfo=timezone.utc)


class MySQLRepository(ItemRepositoryPort):
    """Item repository stored in the ``items`` table of a MySQL database."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def _execute(self, query: str, params: tuple[Any, ...]) -> None:
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query, params)
            self.connection.commit()
        except pymysql.MySQLError as exc:
            raise RepositoryError(str(exc)) from exc

    def save_item(self, item: Item) -> None:
        """Insert a new row; the database assigns the id."""
        self._execute(
            _INSERT,
            (
                item.code,
                item.title,
                item.description,
                item.price,
                item.stock,
                item.status,
                _to_db_time(item.created_at),
                _to_db_time(item.updated_at),
            ),
        )

    def list_items(self) -> dict[int, Item]:
        """Return every row of the table keyed by id."""
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(_SELECT)
                rows = cursor.fetchall()
        except pymysql.MySQLError as exc:
            raise RepositoryError(str(exc)) from exc
        items: dict[int, Item] = {}
        for row in rows:
            (item_id, code, title, description, price, stock, status,
             created_at, updated_at) = row
            items[item_id] = Item(
                id=int(item_id),
                code=code,
                title=title,
                description=description,
                price=float(price),
                stock=int(stock),
                status=status,
                created_at=_from_db_time(created_at),
                updated_at=_from_db_time(updated_at),
            )
        return items

    def update_item(self, item: Item) -> None:
        """Overwrite the row with the item's id; creation time is kept."""
        self._execute(
            _UPDATE,
            (
                item.code,
                item.title,
                item.description,
                item.price,
                item.stock,
                item.status,
                _to_db_time(item.updated_at),
                item.id,
            ),
        )

    def delete_item(self, item_id: int) -> None:
        """Delete the row with this id."""
        self._execute(_DELETE, (item_id,))