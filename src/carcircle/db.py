"""SQLite engine, ``vehicles`` table and sample data.

The repository talks to storage through SQLAlchemy Core; this module owns
the table definition and engine construction.
"""

from __future__ import annotations

import logging

from sqlalchemy import (
    Column,
    Engine,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from carcircle.config import CarCircleConfig
from carcircle.exceptions import StorageUnavailableError

_logger = logging.getLogger(__name__)

metadata = MetaData()

vehicles = Table(
    "vehicles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("make", Text, nullable=False),
    Column("model", Text, nullable=False),
    Column("year", Integer, nullable=False),
    Column("color", Text),
    Column("vin", Text, unique=True),
    Column("mileage", Integer, server_default=text("0")),
    Column("created_at", Text, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)

SAMPLE_VEHICLES: tuple[dict[str, object], ...] = (
    {"make": "Toyota", "model": "Camry", "year": 2022, "color": "Silver", "vin": "1HGBH41JXMN109186", "mileage": 15000},
    {"make": "Honda", "model": "Civic", "year": 2021, "color": "Blue", "vin": "2HGFC2F59MH123456", "mileage": 22000},
    {"make": "Ford", "model": "F-150", "year": 2023, "color": "Black", "vin": "1FTFW1ET5MFC12345", "mileage": 8500},
    {"make": "Tesla", "model": "Model 3", "year": 2023, "color": "White", "vin": "5YJ3E1EA5MF123456", "mileage": 5000},
)


def create_engine_from_config(config: CarCircleConfig) -> Engine:
    """Build the SQLite engine described by *config*.

    In-memory databases share one connection so every repository call
    sees the same data.
    """
    if config.database_path == ":memory:":
        return create_engine(
            config.database_url,
            echo=config.sql_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(config.database_url, echo=config.sql_echo)


def init_schema(engine: Engine) -> None:
    """Create the ``vehicles`` table if it does not exist yet."""
    try:
        metadata.create_all(engine, checkfirst=True)
    except SQLAlchemyError as exc:
        raise StorageUnavailableError(f"Could not initialize schema: {exc}") from exc
    _logger.debug("Database schema initialized")


def seed_sample_vehicles(engine: Engine) -> int:
    """Insert the demo vehicles when the table is empty.

    Returns the number of inserted rows.
    """
    try:
        with engine.begin() as conn:
            count = conn.execute(select(func.count()).select_from(vehicles)).scalar_one()
            if count:
                return 0
            conn.execute(insert(vehicles), [dict(row) for row in SAMPLE_VEHICLES])
    except SQLAlchemyError as exc:
        raise StorageUnavailableError(f"Could not seed sample vehicles: {exc}") from exc
    _logger.info("Inserted %d sample vehicles", len(SAMPLE_VEHICLES))
    return len(SAMPLE_VEHICLES)


def open_database(config: CarCircleConfig) -> Engine:
    """Create the engine, ensure the schema, and seed if configured."""
    engine = create_engine_from_config(config)
    init_schema(engine)
    if config.seed_sample_data:
        seed_sample_vehicles(engine)
    _logger.debug("Database location: %s", config.database_path)
    return engine
