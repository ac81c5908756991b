"""Business layer between the HTTP handlers and the repositories."""

from __future__ import annotations

import uuid

from .models import Circuit, Constructor, Driver
from .repositories import CircuitRepository, ConstructorRepository, DriverRepository


class DriverService:
    """Access to drivers."""

    def __init__(self, repository: DriverRepository) -> None:
        self._repository = repository

    def get_drivers(self, page: int) -> list[Driver]:
        return self._repository.get_all(page)

    def get_drivers_by_name(self, name: str, page: int) -> list[Driver]:
        return self._repository.get_by_name(name, page)

    def get_drivers_by_status(self, status: str, page: int) -> list[Driver]:
        return self._repository.get_by_status(status, page)

    def get_drivers_by_nationality(self, nationality: str, page: int) -> list[Driver]:
        return self._repository.get_by_nationality(nationality, page)

    def get_driver_by_id(self, driver_id: uuid.UUID) -> Driver:
        return self._repository.get_by_id(driver_id)


class ConstructorService:
    """Access to constructors."""

    def __init__(self, repository: ConstructorRepository) -> None:
        self._repository = repository

    def get_constructors(self, page: int) -> list[Constructor]:
        return self._repository.get_all(page)

    def get_constructors_by_name(self, name: str, page: int) -> list[Constructor]:
        return self._repository.get_by_name(name, page)

    def get_constructors_by_nationality(self, nationality: str, page: int) -> list[Constructor]:
        return self._repository.get_by_nationality(nationality, page)

    def get_constructor_by_id(self, constructor_id: uuid.UUID) -> Constructor:
        return self._repository.get_by_id(constructor_id)


class CircuitService:
    """Access to circuits."""

    def __init__(self, repository: CircuitRepository) -> None:
        self._repository = repository

    def get_circuits(self, page: int) -> list[Circuit]:
        return self._repository.get_all(page)

    def get_circuit_by_name(self, name: str) -> Circuit:
        return self._repository.get_by_name(name)

    def get_circuits_by_current(self, current: str, page: int) -> list[Circuit]:
        return self._repository.get_by_current(current, page)

    def get_circuits_by_country(self, country: str, page: int) -> list[Circuit]:
        return self._repository.get_by_country(country, page)

    def get_circuit_by_id(self, circuit_id: uuid.UUID) -> Circuit:
        return self._repository.get_by_id(circuit_id)