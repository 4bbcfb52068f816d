# tests/test_transfer_concurrency.py
import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.modules.transfers import TransfersService
from app.modules.transfers.schemas import TransferCreate
from app.shared.database.models import Base, Counter, Transfer
from tests.conftest import seed_reference_data

WORKERS = 8


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'transfers.db'}",
        connect_args={"check_same_thread": False, "timeout": 30}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


def test_concurrent_creates_never_share_a_transfer_no(file_engine):
    SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)

    session = SessionFactory()
    try:
        refs = seed_reference_data(session)
        payload = {
            "type": "property-transfer-report",
            "from": "Supply Office",
            "division_id": refs["division"].id,
            "school": "Rizal Elementary School",
            "transfer_reason": "Reassignment of equipment",
            "transfer_type": "reassignment",
            "item_stocks": [{"stock_id": refs["laptop_1"].id}],
        }
    finally:
        session.close()

    barrier = threading.Barrier(WORKERS)

    def create_one(_):
        worker_session = SessionFactory()
        try:
            barrier.wait()
            service = TransfersService(worker_session)
            response = asyncio.run(service.create_transfer(TransferCreate(**payload)))
            return response.transfer_no
        finally:
            worker_session.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        numbers = list(pool.map(create_one, range(WORKERS)))

    assert len(set(numbers)) == WORKERS
    assert sorted(int(number.rsplit("-", 1)[1]) for number in numbers) == list(range(1, WORKERS + 1))

    session = SessionFactory()
    try:
        counter = session.query(Counter).filter(Counter.type == "property-transfer-report").one()
        assert counter.value == WORKERS
        assert session.query(Transfer).count() == WORKERS
    finally:
        session.close()
