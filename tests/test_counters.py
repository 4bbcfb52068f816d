# tests/test_counters.py
from datetime import date

import pytest

from app.core.exceptions import BadRequestError, NotFoundError
from app.modules.counters import CounterRepository, format_transfer_no
from app.shared.database.models import Counter


def test_format_transfer_no_pads_date_and_count():
    assert format_transfer_no(7, date(2024, 3, 5)) == "2024-03-05-07"


def test_format_transfer_no_keeps_counts_above_two_digits():
    assert format_transfer_no(123, date(2024, 12, 31)) == "2024-12-31-123"


def test_increment_counter_is_monotonic(db):
    db.add(Counter(type="inventory-transfer-report", value=0))
    db.commit()

    repository = CounterRepository(db)
    assert repository.increment_counter_by_type("inventory-transfer-report") == 1
    assert repository.increment_counter_by_type("inventory-transfer-report") == 2
    db.commit()

    counter = repository.get_counter("inventory-transfer-report")
    assert counter.value == 2


def test_increment_is_discarded_on_rollback(db):
    db.add(Counter(type="property-transfer-report", value=4))
    db.commit()

    repository = CounterRepository(db)
    assert repository.increment_counter_by_type("property-transfer-report") == 5
    db.rollback()

    assert repository.get_counter("property-transfer-report").value == 4


def test_increment_missing_counter_raises_not_found(db):
    with pytest.raises(NotFoundError) as exc_info:
        CounterRepository(db).increment_counter_by_type("property-transfer-report")

    assert exc_info.value.detail == "Counter not found."


def test_create_counter_rejects_duplicate_type(db):
    repository = CounterRepository(db)
    repository.create_counter("inventory-transfer-report")
    db.commit()

    with pytest.raises(BadRequestError):
        repository.create_counter("inventory-transfer-report")
