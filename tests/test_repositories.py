import uuid
from datetime import date

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from f1api.models import Circuit, Constructor, Driver
from f1api.pagination import DEFAULT_PAGE_SIZE
from f1api.repositories import (
    CircuitRepository,
    ConstructorRepository,
    DriverRepository,
    NotFoundError,
)

SCHEMA = [
    "CREATE TABLE drivers (id TEXT PRIMARY KEY, ref TEXT, code TEXT, number INTEGER, "
    "first_name TEXT, last_name TEXT, date_of_birth TEXT, nationality TEXT, status TEXT, url TEXT)",
    "CREATE TABLE constructors (id TEXT PRIMARY KEY, ref TEXT, name TEXT, nationality TEXT, url TEXT)",
    'CREATE TABLE circuits (id TEXT PRIMARY KEY, ref TEXT, name TEXT, location TEXT, '
    'country TEXT, "current" TEXT, url TEXT)',
]


def _driver(ref, code, number, first, last, born, nationality, status):
    return Driver(uuid.uuid4(), ref, code, number, first, last, born, nationality, status,
                  f"https://example.com/drivers/{ref}")


DRIVERS = [
    _driver("hamilton", "HAM", 44, "Lewis", "Hamilton", date(1985, 1, 7), "British", "active"),
    _driver("verstappen", "VER", 1, "Max", "Verstappen", date(1997, 9, 30), "Dutch", "Active"),
    _driver("michael_schumacher", None, None, "Michael", "Schumacher", date(1969, 1, 3),
            "German", "retired"),
    _driver("mick_schumacher", "MSC", 47, "Mick", "Schumacher", date(1999, 3, 22),
            "German", "retired"),
]

CONSTRUCTORS = [
    Constructor(uuid.uuid4(), "mclaren", "McLaren", "British", "https://example.com/mclaren"),
    Constructor(uuid.uuid4(), "williams", "Williams", "British", "https://example.com/williams"),
    Constructor(uuid.uuid4(), "ferrari", "Ferrari", "Italian", "https://example.com/ferrari"),
]

CIRCUITS = [
    Circuit(uuid.uuid4(), "monza", "Monza Circuit", "Monza", "Italy", True,
            "https://example.com/monza"),
    Circuit(uuid.uuid4(), "imola", "Imola Circuit", "Imola", "Italy", False,
            "https://example.com/imola"),
    Circuit(uuid.uuid4(), "silverstone", "Silverstone Circuit", "Silverstone", "UK", True,
            "https://example.com/silverstone"),
]


def _insert_constructors(engine, constructors):
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO constructors VALUES (:id, :ref, :name, :nationality, :url)"),
            [{**c.to_dict()} for c in constructors],
        )


@pytest.fixture
def empty_engine():
    engine = create_engine("sqlite://", poolclass=StaticPool,
                           connect_args={"check_same_thread": False})
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    yield engine
    engine.dispose()


@pytest.fixture
def engine(empty_engine):
    with empty_engine.begin() as conn:
        conn.execute(
            text("INSERT INTO drivers VALUES (:id, :ref, :code, :number, :first_name, "
                 ":last_name, :date_of_birth, :nationality, :status, :url)"),
            [{**d.to_dict(), "date_of_birth": d.date_of_birth.isoformat()} for d in DRIVERS],
        )
        conn.execute(
            text('INSERT INTO circuits VALUES (:id, :ref, :name, :location, :country, '
                 ':current, :url)'),
            [{**c.to_dict(), "current": "true" if c.current else "false"} for c in CIRCUITS],
        )
    _insert_constructors(empty_engine, CONSTRUCTORS)
    return empty_engine


def test_drivers_get_all_is_ordered_by_id(engine):
    result = DriverRepository(engine).get_all(1)
    assert result == sorted(DRIVERS, key=lambda d: str(d.id))


def test_drivers_second_page_is_empty(engine):
    assert DriverRepository(engine).get_all(2) == []


def test_drivers_get_by_name_matches_first_or_last_name(engine):
    repo = DriverRepository(engine)
    assert {d.ref for d in repo.get_by_name("SCHU", 1)} == {
        "michael_schumacher", "mick_schumacher"}
    assert repo.get_by_name("lew", 1) == [DRIVERS[0]]


def test_drivers_get_by_status_is_case_insensitive_and_ordered(engine):
    result = DriverRepository(engine).get_by_status("ACTIVE", 1)
    assert result == [DRIVERS[0], DRIVERS[1]]


def test_drivers_get_by_nationality(engine):
    result = DriverRepository(engine).get_by_nationality("german", 1)
    assert set(result) == {DRIVERS[2], DRIVERS[3]}


def test_drivers_get_by_id_preserves_optional_fields(engine):
    driver = DriverRepository(engine).get_by_id(DRIVERS[2].id)
    assert driver == DRIVERS[2]
    assert driver.code is None and driver.number is None
    assert driver.date_of_birth == DRIVERS[2].date_of_birth


def test_drivers_get_by_unknown_id_raises(engine):
    with pytest.raises(NotFoundError):
        DriverRepository(engine).get_by_id(uuid.uuid4())


def test_constructors_get_by_name_uses_substring(engine):
    assert ConstructorRepository(engine).get_by_name("LAR", 1) == [CONSTRUCTORS[0]]


def test_constructors_get_by_nationality_ordered_by_id(engine):
    result = ConstructorRepository(engine).get_by_nationality("british", 1)
    assert result == sorted(CONSTRUCTORS[:2], key=lambda c: str(c.id))


def test_constructors_get_by_id(engine):
    repo = ConstructorRepository(engine)
    assert repo.get_by_id(CONSTRUCTORS[2].id) == CONSTRUCTORS[2]
    with pytest.raises(NotFoundError):
        repo.get_by_id(uuid.uuid4())


def test_constructors_pages_split_at_page_size(empty_engine):
    teams = [Constructor(uuid.uuid4(), f"team{i}", f"Team {i}", "Nowhere",
                         f"https://example.com/team{i}")
             for i in range(DEFAULT_PAGE_SIZE + 5)]
    _insert_constructors(empty_engine, teams)
    repo = ConstructorRepository(empty_engine)
    first, second = repo.get_all(1), repo.get_all(2)
    assert len(first) == DEFAULT_PAGE_SIZE
    assert first + second == sorted(teams, key=lambda c: str(c.id))
    assert repo.get_all(3) == []


def test_circuits_get_all(engine):
    assert CircuitRepository(engine).get_all(1) == sorted(CIRCUITS, key=lambda c: str(c.id))


def test_circuits_get_by_name_is_exact_but_case_insensitive(engine):
    repo = CircuitRepository(engine)
    assert repo.get_by_name("monza circuit") == CIRCUITS[0]
    with pytest.raises(NotFoundError):
        repo.get_by_name("monza")


def test_circuits_get_by_current_ordered_by_name(engine):
    result = CircuitRepository(engine).get_by_current("true", 1)
    assert result == [CIRCUITS[0], CIRCUITS[2]]
    assert all(c.current for c in result)


def test_circuits_get_by_country_ordered_by_name(engine):
    result = CircuitRepository(engine).get_by_country("ITALY", 1)
    assert result == [CIRCUITS[1], CIRCUITS[0]]


def test_circuits_get_by_id(engine):
    repo = CircuitRepository(engine)
    assert repo.get_by_id(CIRCUITS[1].id) == CIRCUITS[1]
    with pytest.raises(NotFoundError):
        repo.get_by_id(uuid.uuid4())