"""HTTP request handling for drivers, constructors and circuits."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Union
from urllib.parse import parse_qs

from .pagination import parse_page
from .services import CircuitService, ConstructorService, DriverService

logger = logging.getLogger(__name__)

Query = Union[str, Mapping[str, Union[str, Sequence[str]]], None]

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


@dataclass(frozen=True)
class Response:
    """An HTTP response: status code, header pairs and body bytes."""

    status: int
    body: bytes
    headers: tuple[tuple[str, str], ...] = ()


def _json_response(data: Any) -> Response:
    if isinstance(data, list):
        payload = [item.to_dict() for item in data] or None
    elif data is None:
        payload = None
    else:
        payload = data.to_dict()
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return Response(
        status=HTTPStatus.OK,
        body=(text + "\n").encode("utf-8"),
        headers=(("Content-Type", "application/json"),),
    )


def _error_response(message: str, status: HTTPStatus) -> Response:
    return Response(
        status=status,
        body=(message + "\n").encode("utf-8"),
        headers=(
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
        ),
    )


def _parse_query(query: Query) -> dict[str, list[str]]:
    if not query:
        return {}
    if isinstance(query, str):
        return parse_qs(query, keep_blank_values=True)
    return {
        key: [value] if isinstance(value, str) else list(value)
        for key, value in query.items()
    }


def _first(params: Mapping[str, list[str]], key: str) -> str:
    values = params.get(key)
    return values[0] if values else ""


class _ResourceHandler:
    def _run(
        self,
        fetch: Callable[[], Any],
        failure: str,
        label: str,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
    ) -> Response:
        try:
            result = fetch()
        except Exception as exc:
            logger.error("%s error: %s", label, exc)
            return _error_response(failure, status)
        return _json_response(result)

    def _by_id(
        self, path: str, fetch: Callable[[uuid.UUID], Any], not_found: str
    ) -> Response:
        parts = path.split("/")
        if len(parts) < 3:
            return _error_response("Missing ID", HTTPStatus.BAD_REQUEST)
        try:
            item_id = uuid.UUID(parts[2])
        except ValueError as exc:
            logger.warning("Error: Invalid ID format: %s", exc)
            return _error_response("Invalid ID format", HTTPStatus.BAD_REQUEST)
        return self._run(lambda: fetch(item_id), not_found, "GetByID", HTTPStatus.NOT_FOUND)


class DriverHandler(_ResourceHandler):
    """Serves /driver and /driver/<id>."""

    def __init__(self, service: DriverService) -> None:
        self._service = service

    def get_driver(self, query: Query) -> Response:
        params = _parse_query(query)
        page = parse_page(_first(params, "page"))
        service = self._service
        if "name" in params:
            name = _first(params, "name")
            return self._run(
                lambda: service.get_drivers_by_name(name, page),
                "Failed to fetch drivers by name",
                "GetByName",
            )
        if "nationality" in params:
            nationality = _first(params, "nationality")
            return self._run(
                lambda: service.get_drivers_by_nationality(nationality, page),
                "Failed to fetch drivers by nationality",
                "GetByNationality",
            )
        if "status" in params:
            status = _first(params, "status")
            return self._run(
                lambda: service.get_drivers_by_status(status, page),
                "Failed to fetch drivers by status",
                "GetByStatus",
            )
        return self._run(lambda: service.get_drivers(page), "Failed to fetch drivers", "GetAll")

    def get_driver_by_id(self, path: str) -> Response:
        return self._by_id(path, self._service.get_driver_by_id, "Driver not found")


class ConstructorHandler(_ResourceHandler):
    """Serves /constructor and /constructor/<id>."""

    def __init__(self, service: ConstructorService) -> None:
        self._service = service

    def get_constructor(self, query: Query) -> Response:
        params = _parse_query(query)
        page = parse_page(_first(params, "page"))
        service = self._service
        if "name" in params:
            name = _first(params, "name")
            return self._run(
                lambda: service.get_constructors_by_name(name, page),
                "Failed to fetch constructor by name",
                "GetByName",
            )
        if "nationality" in params:
            nationality = _first(params, "nationality")
            return self._run(
                lambda: service.get_constructors_by_nationality(nationality, page),
                "Failed to fetch constructors by nationality",
                "GetByNationality",
            )
        return self._run(
            lambda: service.get_constructors(page), "Failed to fetch constructors", "GetAll"
        )

    def get_constructor_by_id(self, path: str) -> Response:
        return self._by_id(path, self._service.get_constructor_by_id, "Constructor not found")


class CircuitHandler(_ResourceHandler):
    """Serves /circuit and /circuit/<id>."""

    def __init__(self, service: CircuitService) -> None:
        self._service = service

    def get_circuit(self, query: Query) -> Response:
        params = _parse_query(query)
        page = parse_page(_first(params, "page"))
        service = self._service
        if "name" in params:
            name = _first(params, "name")
            return self._run(
                lambda: service.get_circuit_by_name(name),
                "Failed to fetch circuit by name",
                "GetByName",
            )
        if "country" in params:
            country = _first(params, "country")
            return self._run(
                lambda: service.get_circuits_by_country(country, page),
                "Failed to fetch circuits by country",
                "GetByCountry",
            )
        if "current" in params:
            current = _first(params, "current")
            return self._run(
                lambda: service.get_circuits_by_current(current, page),
                "Failed to fetch circuits by current",
                "GetByCurrent",
            )
        return self._run(lambda: service.get_circuits(page), "Failed to fetch circuits", "GetAll")

    def get_circuit_by_id(self, path: str) -> Response:
        return self._by_id(path, self._service.get_circuit_by_id, "Circuit not found")