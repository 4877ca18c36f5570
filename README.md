# stockroom

Inventory items kept behind a repository interface, with a use-case layer
that applies the business rules, an in-memory store, a MySQL store, and a
small Flask greeting application.

## Modules

- `stockroom.item` — the frozen `Item` dataclass (`id`, `code`, `title`,
  `description`, `price`, `stock`, `status`, `created_at`, `updated_at`),
  the abstract `ItemRepositoryPort`, and the `NotFoundError` and
  `RepositoryError` exceptions. `Item.to_dict()` gives a JSON-ready mapping
  with RFC 3339 timestamps; `Item.from_dict(data)` builds an item from a
  decoded JSON object, matching keys exactly or case-insensitively, ignoring
  unknown keys and nulls, and raising `ValueError` on a value of the wrong
  type.
- `stockroom.memory` — `MapRepository`, an in-memory store keyed by item id.
  An id of 0 is rejected, saving an id that already exists is rejected, and
  updating or deleting an id that does not exist is rejected, each with a
  `RepositoryError`. `list_items()` returns a copy of the stored mapping.
- `stockroom.usecase` — `ItemUsecasePort` and `ItemUsecase(repo)`. Saving
  stamps `created_at` and `updated_at` with the current time, updating
  refreshes `updated_at`, and any repository failure is raised as
  `UsecaseError` with the original error as its cause. Listing an empty
  store returns an empty dictionary.
- `stockroom.mysql` — `MySQLClientConfig` (with `dsn()`), `MySQLClient`
  (opens and pings a connection, usable as a context manager, exposes
  `connection`, raises `MySQLClientError` on failure), `default_client()`
  (user `api_user`, host `mysql`, port 3306, database `inventory`) and
  `MySQLRepository(connection)`, which stores items in an `items` table.
  Database errors are raised as `RepositoryError`.
- `stockroom.greetings` — `create_app()` and `main()`, a tiny greeting
  application.

## Using the item layers

```python
from stockroom.item import Item
from stockroom.memory import MapRepository
from stockroom.usecase import ItemUsecase

usecase = ItemUsecase(MapRepository())
usecase.save_item(Item(id=1, code="ABC123", title="Notebook", price=3500.5, stock=10))
print(usecase.list_items()[1].to_dict())
```

With MySQL instead:

```python
from stockroom.mysql import MySQLClient, MySQLClientConfig, MySQLRepository
from stockroom.usecase import ItemUsecase

password = "password"
config = MySQLClientConfig(
    user="user", password=password, host="localhost", port="3306", database="inventory"
)
with MySQLClient(config) as client:
    usecase = ItemUsecase(MySQLRepository(client.connection))
    print(usecase.list_items())
```

When saving to MySQL the database assigns the id; updating keeps the stored
creation time.

## The greeting application

```
stockroom-greetings [--port PORT]
```

Serves on port 8080 by default:

| Method                 | Path     | Response                                   |
|------------------------|----------|--------------------------------------------|
| GET, POST, PUT, DELETE | `/`      | a plain-text line for each method          |
| GET                    | `/hello` | `Hello, world!`                            |
| POST                   | `/bye`   | echoes the `message` field of a JSON body  |

A `/bye` body that is not a JSON object of strings gets a 400 response with
`{"error": "Failed to bind JSON"}`; a missing `message` field gets a 400
with `{"error": "Message field is missing"}`. Unknown paths and methods get
a plain-text 404.

## What is not included

There is no HTTP server or command for the inventory items: the package
offers the item model, the stores and the use case as a Python library only.
Serving them over HTTP is left to the application that uses them.