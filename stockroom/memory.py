"""Item repository that keeps everything in a dictionary."""

from __future__ import annotations

from stockroom.item import Item, ItemRepositoryPort, RepositoryError


class MapRepository(ItemRepositoryPort):
    """In-memory item store, handy for local runs and tests."""

    def __init__(self) -> None:
        self._items: dict[int, Item] = {}

    def save_item(self, item: Item) -> None:
        """Store a new item; the id must be non-zero and unused."""
        if item.id == 0:
            raise RepositoryError("ID do item não pode ser 0")
        if item.id in self._items:
            raise RepositoryError(f"já existe um item com o ID {item.id}")
        self._items[item.id] = item

    def list_items(self) -> dict[int, Item]:
        """Return a snapshot of every stored item keyed by id."""
        return dict(self._items)

    def update_item(self, item: Item) -> None:
        """Replace the stored item that has the same id."""
        if item.id == 0:
            raise RepositoryError("ID do item não pode ser 0")
        if item.id not in self._items:
            raise RepositoryError(f"item com ID {item.id} não existe")
        self._items[item.id] = item

    def delete_item(self, item_id: int) -> None:
        """Remove the item with this id."""
        if item_id == 0:
            raise RepositoryError("ID do item não pode ser 0")
        if item_id not in self._items:
            raise RepositoryError(f"item com ID {item_id} não existe")
        del self._items[item_id]