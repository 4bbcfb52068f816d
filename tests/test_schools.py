# tests/test_schools.py
import asyncio

import pytest

from app.core.exceptions import BadRequestError, NotFoundError
from app.modules.schools import SchoolsService
from app.shared.database.models import School


def find_or_create(db, value, division_id=None):
    return asyncio.run(SchoolsService(db).find_or_create_school(value, division_id))


def test_finds_school_by_name(db, seed):
    school = find_or_create(db, "Rizal Elementary School", seed["division"].id)

    assert school["id"] == seed["school"].id
    assert school["name"] == "Rizal Elementary School"


def test_finds_school_by_numeric_id(db, seed):
    school = find_or_create(db, str(seed["school"].id))

    assert school["name"] == "Rizal Elementary School"
    assert school["division_id"] == seed["division"].id


def test_creates_missing_school_under_division(db, seed):
    school = find_or_create(db, "  Bonifacio High School ", seed["division"].id)

    assert school["name"] == "Bonifacio High School"
    assert school["division_id"] == seed["division"].id
    assert db.query(School).count() == 2


def test_missing_division_raises_not_found(db, seed):
    with pytest.raises(NotFoundError) as exc_info:
        find_or_create(db, "Bonifacio High School", 999)

    assert exc_info.value.detail == "School division not found."


def test_blank_value_raises_bad_request(db, seed):
    with pytest.raises(BadRequestError) as exc_info:
        find_or_create(db, "   ", seed["division"].id)

    assert exc_info.value.detail == "School name is required."
    assert db.query(School).count() == 1


def test_non_ascii_digits_are_treated_as_a_name(db, seed):
    school = find_or_create(db, "²", seed["division"].id)

    assert school["name"] == "²"
    assert school["id"] != seed["school"].id
