"""Fixtures for infrastructure unit tests."""

from datetime import date

import pytest

from viron.infrastructure.database.models import Dependent, PersonalInfo


@pytest.fixture
def personal_info() -> PersonalInfo:
    """A stored self-employed profile with every membership number."""
    return PersonalInfo(
        id=10,
        user_id=7,
        full_name="Juan dela Cruz",
        tin="123-456-789",
        birth_date=date(1990, 5, 17),
        employment_status="self-employed",
        philhealth_number="12-345678901-2",
        sss_number="34-1234567-8",
        pagibig_number="1212-3434-5656",
    )


@pytest.fixture
def dependents() -> list[Dependent]:
    """Two stored dependents of user 7."""
    return [
        Dependent(id=1, user_id=7, dep_name="Maria", dep_relationship="Child"),
        Dependent(
            id=2,
            user_id=7,
            dep_name="Jose",
            dep_birth_date=date(2015, 3, 1),
            dep_relationship="Child",
        ),
    ]
