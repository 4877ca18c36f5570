"""Inventory item model, the repository contract and the shared errors."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
"""Timestamp an item carries until one is set."""


class NotFoundError(LookupError):
    """A requested resource does not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class RepositoryError(Exception):
    """A repository refused or failed an operation."""


_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})\Z"
)


def _decode_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {name!r} must be an integer")
    return value


def _decode_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {name!r} must be a number")
    return float(value)


def _decode_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string")
    return value


def _decode_time(value: Any, name: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be an RFC 3339 timestamp string")
    match = _TIME_RE.match(value)
    if match is None:
        raise ValueError(f"field {name!r} is not an RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    microsecond = int((fraction + "000000")[:6])
    zone = match.group(8)
    try:
        if zone in ("Z", "z"):
            tz = timezone.utc
        else:
            sign = 1 if zone[0] == "+" else -1
            offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
            tz = timezone(sign * offset)
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as exc:
        raise ValueError(f"field {name!r} is not a valid timestamp: {value!r}") from exc


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _decoder(decode: Callable[[Any, str], Any]) -> dict[str, Any]:
    return {"decode": decode}


@dataclass(frozen=True)
class Item:
    """A product held in the inventory."""

    id: int = field(default=0, metadata=_decoder(_decode_int))
    code: str = field(default="", metadata=_decoder(_decode_str))
    title: str = field(default="", metadata=_decoder(_decode_str))
    description: str = field(default="", metadata=_decoder(_decode_str))
    price: float = field(default=0.0, metadata=_decoder(_decode_float))
    stock: int = field(default=0, metadata=_decoder(_decode_int))
    status: str = field(default="", metadata=_decoder(_decode_str))
    created_at: datetime = field(default=ZERO_TIME, metadata=_decoder(_decode_time))
    updated_at: datetime = field(default=ZERO_TIME, metadata=_decoder(_decode_time))

    def to_dict(self) -> dict[str, Any]:
        """Return the item as a JSON-ready mapping."""
        return {
            "id": self.id,
            "code": self.code,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "status": self.status,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Item":
        """Build an item from a decoded JSON object.

        Keys match field names exactly or, failing that, case-insensitively.
        Unknown keys are ignored, nulls and missing keys leave the default,
        and a value of the wrong type raises ValueError.
        """
        if not isinstance(data, Mapping):
            raise ValueError("item must be a JSON object")
        known = {f.name: f for f in fields(cls)}
        folded = {name.casefold(): f for name, f in known.items()}
        values: dict[str, Any] = {}
        for key, raw in data.items():
            if not isinstance(key, str):
                continue
            target = known.get(key) or folded.get(key.casefold())
            if target is None or raw is None:
                continue
            values[target.name] = target.metadata["decode"](raw, target.name)
        return cls(**values)


class ItemRepositoryPort(ABC):
    """Storage contract every item repository fulfils."""

    @abstractmethod
    def save_item(self, item: Item) -> None:
        """Store a new item; raise RepositoryError if it is refused."""

    @abstractmethod
    def list_items(self) -> dict[int, Item]:
        """Return every stored item keyed by its id."""

    @abstractmethod
    def update_item(self, item: Item) -> None:
        """Replace an existing item; raise RepositoryError if it is refused."""

    @abstractmethod
    def delete_item(self, item_id: int) -> None:
        """Remove the item with this id; raise RepositoryError if it is refused."""