"""WSGI application wiring and the server entry point."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any
from wsgiref.simple_server import make_server

from sqlalchemy.engine import Engine

from .db import DatabaseConfigError, connect, load_database_url
from .handlers import CircuitHandler, ConstructorHandler, DriverHandler, Query, Response
from .repositories import CircuitRepository, ConstructorRepository, DriverRepository
from .services import CircuitService, ConstructorService, DriverService

logger = logging.getLogger(__name__)

_TEXT_PLAIN = ("Content-Type", "text/plain; charset=utf-8")

WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


def health_check(query: Query) -> Response:
    """Report that the server is up."""
    return Response(status=HTTPStatus.OK, body=b"OK", headers=(_TEXT_PLAIN,))


def _not_found() -> Response:
    return Response(
        status=HTTPStatus.NOT_FOUND,
        body=b"404 page not found\n",
        headers=(_TEXT_PLAIN, ("X-Content-Type-Options", "nosniff")),
    )


def create_app(engine: Engine) -> WSGIApp:
    """Build the WSGI application serving the API from ``engine``."""
    drivers = DriverHandler(DriverService(DriverRepository(engine)))
    circuits = CircuitHandler(CircuitService(CircuitRepository(engine)))
    constructors = ConstructorHandler(ConstructorService(ConstructorRepository(engine)))

    exact: dict[str, Callable[[str], Response]] = {
        "/health": health_check,
        "/driver": drivers.get_driver,
        "/circuit": circuits.get_circuit,
        "/constructor": constructors.get_constructor,
    }
    subtrees: tuple[tuple[str, Callable[[str], Response]], ...] = (
        ("/driver/", drivers.get_driver_by_id),
        ("/circuit/", circuits.get_circuit_by_id),
        ("/constructor/", constructors.get_constructor_by_id),
    )

    def dispatch(path: str, query: str) -> Response:
        if path in exact:
            return exact[path](query)
        for prefix, handler in subtrees:
            if path.startswith(prefix):
                return handler(path)
        return _not_found()

    def app(environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        raw_path = environ.get("PATH_INFO") or "/"
        path = raw_path.encode("latin-1").decode("utf-8", "replace")
        response = dispatch(path, environ.get("QUERY_STRING", ""))
        status = HTTPStatus(response.status)
        headers = [*response.headers, ("Content-Length", str(len(response.body)))]
        start_response(f"{status.value} {status.phrase}", headers)
        return [response.body]

    return app


def main(argv: list[str] | None = None) -> int:
    """Connect to the database and serve the API on $PORT."""
    parser = argparse.ArgumentParser(prog="f1api", description="Serve the F1 data API over HTTP.")
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        engine = connect(load_database_url())
    except DatabaseConfigError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Failed to connect to the database: %s", exc)
        return 1

    try:
        port = os.environ.get("PORT", "")
        try:
            port_number = int(port) if port else 0
        except ValueError:
            logger.error("Failed to start: invalid port %r", port)
            return 1
        logger.info("Server is running on http://localhost:%s/health", port)
        try:
            with make_server("", port_number, create_app(engine)) as server:
                server.serve_forever()
        except OSError as exc:
            logger.error("Failed to start: %s", exc)
            return 1
        except KeyboardInterrupt:
            return 0
    finally:
        engine.dispose()
    return 0