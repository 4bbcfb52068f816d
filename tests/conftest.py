# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import get_db
from app.config.settings import settings
from app.main import app
from app.shared.database.models import (
    Base, Asset, Configuration, Counter, School, SchoolDivision, Stock, User,
    GOOD_CONDITION, REISSUED, TRANSFER_TYPES
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def seed_reference_data(db):
    """Datos de referencia: división, escuela, usuarios, configuración, contadores y stock"""
    division = SchoolDivision(name="Division of Manila")
    db.add(division)
    db.flush()

    school = School(name="Rizal Elementary School", division_id=division.id)
    approver = User(
        email="approver@deped.test", title="Dr.", first_name="Ana",
        last_name="Santos", designation="Schools Division Superintendent"
    )
    issuer = User(
        email="issuer@deped.test", first_name="Ben",
        last_name="Cruz", designation="Supply Officer"
    )
    db.add_all([school, approver, issuer])

    db.add_all([
        Configuration(name=settings.entity_name_config, value="SDO Manila"),
        Configuration(name=settings.fund_cluster_sep_config, value="SEP-01"),
        Configuration(name=settings.fund_cluster_ppe_config, value="PPE-02"),
    ])
    db.add_all([Counter(type=transfer_type, value=0) for transfer_type in TRANSFER_TYPES])

    laptop = Asset(
        type="SEP", name="Laptop", description="14-inch laptop", stock_number="SEP-LT-001",
        unit_of_measurement="unit", cost=45000, initial_qty=10, quantity=10
    )
    chair = Asset(
        type="SEP", name="Monobloc Chair", description="Plastic chair", stock_number="SEP-CH-001",
        unit_of_measurement="piece", cost=500, initial_qty=5, quantity=0
    )
    db.add_all([laptop, chair])
    db.flush()

    laptop_1 = Stock(asset_id=laptop.id, asset_name=laptop.name, serial_no="LT-0001",
                     reference="RIS-001", condition=GOOD_CONDITION)
    laptop_2 = Stock(asset_id=laptop.id, asset_name=laptop.name, serial_no="LT-0002",
                     reference="RIS-002", condition=GOOD_CONDITION)
    laptop_reissued = Stock(asset_id=laptop.id, asset_name=laptop.name, serial_no="LT-0009",
                            reference="ICS-009", item_no="3", condition=REISSUED)
    chair_1 = Stock(asset_id=chair.id, asset_name=chair.name, serial_no="CH-0001",
                    condition=GOOD_CONDITION)
    db.add_all([laptop_1, laptop_2, laptop_reissued, chair_1])
    db.commit()

    return {
        "division": division,
        "school": school,
        "approver": approver,
        "issuer": issuer,
        "laptop": laptop,
        "chair": chair,
        "laptop_1": laptop_1,
        "laptop_2": laptop_2,
        "laptop_reissued": laptop_reissued,
        "chair_1": chair_1,
    }


@pytest.fixture
def seed(db):
    return seed_reference_data(db)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.state.report_config = None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def transfer_payload(seed):
    """Payload base de creación; los tests sobreescriben lo que necesiten"""
    def build(**overrides):
        payload = {
            "type": "property-transfer-report",
            "from": "Supply Office",
            "division_id": seed["division"].id,
            "school": "Rizal Elementary School",
            "transfer_reason": "Reassignment of equipment",
            "transfer_type": "reassignment",
            "item_stocks": [
                {"stock_id": seed["laptop_1"].id},
                {"stock_id": seed["laptop_2"].id},
            ],
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def create_transfer(db, transfer_payload):
    """Crear una transferencia vía servicio y devolver su ID"""
    import asyncio
    from app.modules.transfers import TransfersService
    from app.modules.transfers.schemas import TransferCreate

    def create(**overrides):
        data = TransferCreate(**transfer_payload(**overrides))
        response = asyncio.run(TransfersService(db).create_transfer(data))
        return response.transfer_id

    return create
