"""Records served by the API and their JSON representations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any


def _format_time(value: date) -> str:
    """Render a date or datetime as an RFC 3339 timestamp."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        text = value.isoformat()
        if text.endswith("+00:00"):
            text = text[: -len("+00:00")] + "Z"
        return text
    return f"{value.isoformat()}T00:00:00Z"


@dataclass(frozen=True)
class Driver:
    """A racing driver."""

    id: uuid.UUID
    ref: str
    code: str | None
    number: int | None
    first_name: str
    last_name: str
    date_of_birth: date
    nationality: str
    status: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "ref": self.ref,
            "code": self.code,
            "number": self.number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "date_of_birth": _format_time(self.date_of_birth),
            "nationality": self.nationality,
            "status": self.status,
            "url": self.url,
        }


@dataclass(frozen=True)
class Constructor:
    """A racing team."""

    id: uuid.UUID
    ref: str
    name: str
    nationality: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "ref": self.ref,
            "name": self.name,
            "nationality": self.nationality,
            "url": self.url,
        }


@dataclass(frozen=True)
class Circuit:
    """A race track."""

    id: uuid.UUID
    ref: str
    name: str
    location: str
    country: str
    current: bool
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "ref": self.ref,
            "name": self.name,
            "location": self.location,
            "country": self.country,
            "current": self.current,
            "url": self.url,
        }