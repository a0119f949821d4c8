from __future__ import annotations

import pytest
from sqlalchemy import Engine, text

from carcircle.config import CarCircleConfig
from carcircle.db import SAMPLE_VEHICLES, create_engine_from_config, init_schema, seed_sample_vehicles
from carcircle.exceptions import (
    ConflictError,
    StorageUnavailableError,
    VehicleNotFoundError,
    VehicleValidationError,
)
from carcircle.models.vehicle import max_vehicle_year
from carcircle.repository import VehicleRepository

CIVIC = {"make": "Honda", "model": "Civic", "year": 2021, "vin": "2HGFC2F59MH123456"}
CAMRY = {"make": "Toyota", "model": "Camry", "year": 2022, "color": "Silver", "vin": "1HGBH41JXMN109186", "mileage": 15000}


@pytest.fixture
def engine() -> Engine:
    engine = create_engine_from_config(CarCircleConfig(database_path=":memory:"))
    init_schema(engine)
    return engine


@pytest.fixture
def repository(engine: Engine) -> VehicleRepository:
    return VehicleRepository(engine)


def test_civic_lifecycle(repository: VehicleRepository) -> None:
    created = repository.create(CIVIC)
    assert created.id == 1
    assert created.created_at
    assert created.mileage == 0  # column default, read back from storage

    updated = repository.update(1, {"mileage": 22000})
    assert updated.mileage == 22000
    assert updated.model == "Civic"
    assert updated.vin == CIVIC["vin"]

    repository.delete(1)
    with pytest.raises(VehicleNotFoundError, match="Vehicle with ID 1 not found"):
        repository.get_by_id(1)


def test_get_returns_what_create_returned(repository: VehicleRepository) -> None:
    created = repository.create(CAMRY)
    assert repository.get_by_id(created.id) == created


def test_create_ignores_caller_supplied_id(repository: VehicleRepository) -> None:
    created = repository.create({**CIVIC, "id": 99, "created_at": "1999-01-01 00:00:00"})
    assert created.id == 1
    assert created.created_at != "1999-01-01 00:00:00"


@pytest.mark.parametrize("year", [1899, max_vehicle_year() + 1])
def test_create_rejects_year_out_of_range(repository: VehicleRepository, year: int) -> None:
    with pytest.raises(VehicleValidationError) as excinfo:
        repository.create({**CIVIC, "year": year})
    assert [issue.field for issue in excinfo.value.issues] == ["year"]
    assert repository.list() == []


def test_duplicate_vin_is_a_conflict(repository: VehicleRepository) -> None:
    first = repository.create(CIVIC)
    with pytest.raises(ConflictError, match="VIN"):
        repository.create({**CAMRY, "vin": CIVIC["vin"]})
    assert repository.list() == [first]


def test_vehicles_without_vin_do_not_conflict(repository: VehicleRepository) -> None:
    a = repository.create({**CIVIC, "vin": ""})
    b = repository.create({**CAMRY, "vin": ""})
    assert a.vin is None
    assert b.vin is None


def test_update_to_duplicate_vin_is_a_conflict(repository: VehicleRepository) -> None:
    repository.create(CIVIC)
    camry = repository.create(CAMRY)
    with pytest.raises(ConflictError):
        repository.update(camry.id, {"vin": CIVIC["vin"]})
    assert repository.get_by_id(camry.id).vin == CAMRY["vin"]


def test_partial_update_keeps_other_fields(repository: VehicleRepository) -> None:
    camry = repository.create(CAMRY)
    updated = repository.update(camry.id, {"color": "Red"})
    assert updated.color == "Red"
    assert updated.mileage == 15000
    assert updated.model_dump(exclude={"color"}) == camry.model_dump(exclude={"color"})


def test_update_can_clear_optional_field(repository: VehicleRepository) -> None:
    camry = repository.create(CAMRY)
    assert repository.update(camry.id, {"color": None}).color is None


def test_empty_update_rejected(repository: VehicleRepository) -> None:
    camry = repository.create(CAMRY)
    with pytest.raises(VehicleValidationError, match="No fields to update"):
        repository.update(camry.id, {})
    with pytest.raises(VehicleValidationError, match="No fields to update"):
        repository.update(camry.id, {"id": 5})
    assert repository.get_by_id(camry.id) == camry


def test_update_missing_row(repository: VehicleRepository) -> None:
    with pytest.raises(VehicleNotFoundError):
        repository.update(42, {"color": "Red"})


def test_delete_twice(repository: VehicleRepository) -> None:
    created = repository.create(CIVIC)
    repository.delete(created.id)
    with pytest.raises(VehicleNotFoundError):
        repository.delete(created.id)


def test_delete_nonexistent(repository: VehicleRepository) -> None:
    with pytest.raises(VehicleNotFoundError):
        repository.delete(7)


@pytest.mark.parametrize("bad_id", [0, -1, "1", 1.5, True])
def test_invalid_ids_fail_validation(repository: VehicleRepository, bad_id: object) -> None:
    with pytest.raises(VehicleValidationError, match="positive integer"):
        repository.get_by_id(bad_id)
    with pytest.raises(VehicleValidationError):
        repository.delete(bad_id)
    with pytest.raises(VehicleValidationError):
        repository.update(bad_id, {"color": "Red"})


def test_list_newest_first(engine: Engine, repository: VehicleRepository) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO vehicles (make, model, year, created_at) VALUES "
                "('Old', 'One', 2000, '2020-01-01 00:00:00'), "
                "('New', 'Two', 2001, '2024-01-01 00:00:00')"
            )
        )
    same_second_a = repository.create(CIVIC)
    same_second_b = repository.create(CAMRY)

    makes = [v.make for v in repository.list()]
    assert makes[-2:] == ["New", "Old"]
    # Ties on created_at are broken by id.
    if same_second_a.created_at == same_second_b.created_at:
        assert makes[:2] == ["Toyota", "Honda"]


def test_storage_failure_is_reported(engine: Engine, repository: VehicleRepository) -> None:
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE vehicles"))
    with pytest.raises(StorageUnavailableError):
        repository.list()
    with pytest.raises(StorageUnavailableError):
        repository.create(CIVIC)


def test_seed_only_when_empty(engine: Engine, repository: VehicleRepository) -> None:
    assert seed_sample_vehicles(engine) == len(SAMPLE_VEHICLES)
    assert seed_sample_vehicles(engine) == 0
    assert {v.make for v in repository.list()} == {"Toyota", "Honda", "Ford", "Tesla"}


def test_init_schema_is_idempotent(engine: Engine, repository: VehicleRepository) -> None:
    repository.create(CIVIC)
    init_schema(engine)
    assert len(repository.list()) == 1
