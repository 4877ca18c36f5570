"""Business rules for inventory items, sitting between handlers and storage."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.item import Item, ItemRepositoryPort


class UsecaseError(Exception):
    """An item operation failed; the underlying error is kept as the cause."""


def _now() -> datetime:
    return datetime.now().astimezone()


class ItemUsecasePort(ABC):
    """Operations the application layer offers for inventory items."""

    @abstractmethod
    def save_item(self, item: Item) -> None:
        """Store a new item."""

    @abstractmethod
    def list_items(self) -> dict[int, Item]:
        """Return every stored item keyed by id."""

    @abstractmethod
    def update_item(self, item: Item) -> None:
        """Replace the data of an existing item."""

    @abstractmethod
    def delete_item(self, item_id: int) -> None:
        """Remove the item with this id."""


class ItemUsecase(ItemUsecasePort):
    """Item operations backed by any repository that honours the port."""

    def __init__(self, repo: ItemRepositoryPort) -> None:
        self.repo = repo

    def save_item(self, item: Item) -> None:
        """Stamp creation and update times, then store the item."""
        now = _now()
        stamped = dataclasses.replace(item, created_at=now, updated_at=now)
        try:
            self.repo.save_item(stamped)
        except Exception as exc:
            raise UsecaseError(f"error saving item: {exc}") from exc

    def list_items(self) -> dict[int, Item]:
        """Return every stored item; an empty store gives an empty mapping."""
        try:
            return self.repo.list_items()
        except Exception as exc:
            raise UsecaseError(f"error in repository: {exc}") from exc

    def update_item(self, item: Item) -> None:
        """Refresh the update time, then replace the stored item."""
        stamped = dataclasses.replace(item, updated_at=_now())
        try:
            self.repo.update_item(stamped)
        except Exception as exc:
            raise UsecaseError(f"error updating item: {exc}") from exc

    def delete_item(self, item_id: int) -> None:
        """Remove the item with this id."""
        try:
            self.repo.delete_item(item_id)
        except Exception as exc:
            raise UsecaseError(f"error deleting item: {exc}") from exc