"""Read-only queries over the drivers, constructors and circuits tables."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine, Row

from .models import Circuit, Constructor, Driver
from .pagination import DEFAULT_PAGE_SIZE, page_offset


class NotFoundError(LookupError):
    """Raised when a single-row lookup finds nothing."""


def _as_uuid(value: Any) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date() if "T" in str(value) else date.fromisoformat(str(value))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"t", "true", "1", "y", "yes", "on"}
    return bool(value)


def _page_params(page: int) -> dict[str, int]:
    return {"limit": DEFAULT_PAGE_SIZE, "offset": page_offset(page)}


class _Queries:
    _engine: Engine

    def _fetch_all(self, sql: str, **params: Any) -> list[Row]:
        with self._engine.connect() as conn:
            return list(conn.execute(text(sql), params))

    def _fetch_one(self, sql: str, what: str, **params: Any) -> Row:
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), params).first()
        if row is None:
            raise NotFoundError(f"{what} not found")
        return row


_DRIVER_COLUMNS = (
    "id, ref, code, number, first_name, last_name, date_of_birth, nationality, status, url"
)


def _driver(row: Row) -> Driver:
    return Driver(
        id=_as_uuid(row.id),
        ref=row.ref,
        code=row.code,
        number=None if row.number is None else int(row.number),
        first_name=row.first_name,
        last_name=row.last_name,
        date_of_birth=_as_date(row.date_of_birth),
        nationality=row.nationality,
        status=row.status,
        url=row.url,
    )


class DriverRepository(_Queries):
    """Queries over the drivers table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_all(self, page: int) -> list[Driver]:
        rows = self._fetch_all(
            f"SELECT {_DRIVER_COLUMNS} FROM drivers ORDER BY id LIMIT :limit OFFSET :offset",
            **_page_params(page),
        )
        return [_driver(row) for row in rows]

    def get_by_name(self, name: str, page: int) -> list[Driver]:
        rows = self._fetch_all(
            f"SELECT {_DRIVER_COLUMNS} FROM drivers "
            "WHERE LOWER(first_name) LIKE LOWER(:pattern) OR LOWER(last_name) LIKE LOWER(:pattern) "
            "ORDER BY last_name LIMIT :limit OFFSET :offset",
            pattern=f"%{name}%",
            **_page_params(page),
        )
        return [_driver(row) for row in rows]

    def get_by_status(self, status: str, page: int) -> list[Driver]:
        rows = self._fetch_all(
            f"SELECT {_DRIVER_COLUMNS} FROM drivers WHERE LOWER(status) = LOWER(:status) "
            "ORDER BY last_name LIMIT :limit OFFSET :offset",
            status=status,
            **_page_params(page),
        )
        return [_driver(row) for row in rows]

    def get_by_nationality(self, nationality: str, page: int) -> list[Driver]:
        rows = self._fetch_all(
            f"SELECT {_DRIVER_COLUMNS} FROM drivers WHERE LOWER(nationality) = LOWER(:nationality) "
            "ORDER BY last_name LIMIT :limit OFFSET :offset",
            nationality=nationality,
            **_page_params(page),
        )
        return [_driver(row) for row in rows]

    def get_by_id(self, driver_id: uuid.UUID) -> Driver:
        row = self._fetch_one(
            f"SELECT {_DRIVER_COLUMNS} FROM drivers WHERE id = :id",
            "driver",
            id=str(driver_id),
        )
        return _driver(row)


_CONSTRUCTOR_COLUMNS = "id, ref, name, nationality, url"


def _constructor(row: Row) -> Constructor:
    return Constructor(
        id=_as_uuid(row.id),
        ref=row.ref,
        name=row.name,
        nationality=row.nationality,
        url=row.url,
    )


class ConstructorRepository(_Queries):
    """Queries over the constructors table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_all(self, page: int) -> list[Constructor]:
        rows = self._fetch_all(
            f"SELECT {_CONSTRUCTOR_COLUMNS} FROM constructors ORDER BY id "
            "LIMIT :limit OFFSET :offset",
            **_page_params(page),
        )
        return [_constructor(row) for row in rows]

    def get_by_name(self, name: str, page: int) -> list[Constructor]:
        rows = self._fetch_all(
            f"SELECT {_CONSTRUCTOR_COLUMNS} FROM constructors "
            "WHERE LOWER(name) LIKE LOWER(:pattern) ORDER BY id LIMIT :limit OFFSET :offset",
            pattern=f"%{name}%",
            **_page_params(page),
        )
        return [_constructor(row) for row in rows]

    def get_by_nationality(self, nationality: str, page: int) -> list[Constructor]:
        rows = self._fetch_all(
            f"SELECT {_CONSTRUCTOR_COLUMNS} FROM constructors "
            "WHERE LOWER(nationality) = LOWER(:nationality) ORDER BY id "
            "LIMIT :limit OFFSET :offset",
            nationality=nationality,
            **_page_params(page),
        )
        return [_constructor(row) for row in rows]

    def get_by_id(self, constructor_id: uuid.UUID) -> Constructor:
        row = self._fetch_one(
            f"SELECT {_CONSTRUCTOR_COLUMNS} FROM constructors WHERE id = :id",
            "constructor",
            id=str(constructor_id),
        )
        return _constructor(row)


_CIRCUIT_COLUMNS = 'id, ref, name, location, country, "current", url'


def _circuit(row: Row) -> Circuit:
    return Circuit(
        id=_as_uuid(row.id),
        ref=row.ref,
        name=row.name,
        location=row.location,
        country=row.country,
        current=_as_bool(row.current),
        url=row.url,
    )


class CircuitRepository(_Queries):
    """Queries over the circuits table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_all(self, page: int) -> list[Circuit]:
        rows = self._fetch_all(
            f"SELECT {_CIRCUIT_COLUMNS} FROM circuits ORDER BY id LIMIT :limit OFFSET :offset",
            **_page_params(page),
        )
        return [_circuit(row) for row in rows]

    def get_by_name(self, name: str) -> Circuit:
        row = self._fetch_one(
            f"SELECT {_CIRCUIT_COLUMNS} FROM circuits WHERE LOWER(name) LIKE LOWER(:name)",
            "circuit",
            name=name,
        )
        return _circuit(row)

    def get_by_current(self, current: str, page: int) -> list[Circuit]:
        rows = self._fetch_all(
            f'SELECT {_CIRCUIT_COLUMNS} FROM circuits WHERE "current" = :current '
            "ORDER BY name LIMIT :limit OFFSET :offset",
            current=current,
            **_page_params(page),
        )
        return [_circuit(row) for row in rows]

    def get_by_country(self, country: str, page: int) -> list[Circuit]:
        rows = self._fetch_all(
            f"SELECT {_CIRCUIT_COLUMNS} FROM circuits WHERE LOWER(country) = LOWER(:country) "
            "ORDER BY name LIMIT :limit OFFSET :offset",
            country=country,
            **_page_params(page),
        )
        return [_circuit(row) for row in rows]

    def get_by_id(self, circuit_id: uuid.UUID) -> Circuit:
        row = self._fetch_one(
            f"SELECT {_CIRCUIT_COLUMNS} FROM circuits WHERE id = :id",
            "circuit",
            id=str(circuit_id),
        )
        return _circuit(row)