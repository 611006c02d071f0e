"""Unit tests for viron/domain/contributions/models.py."""

import dataclasses
from datetime import date

import pytest

from viron.domain.contributions import (
    Agency,
    DueDateEntry,
    EmploymentStatus,
    TaxProfile,
)


@pytest.mark.unit
class TestEmploymentStatus:
    """Parsing and labels of EmploymentStatus."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("employed", EmploymentStatus.EMPLOYED),
            ("self-employed", EmploymentStatus.SELF_EMPLOYED),
            (None, None),
            ("", None),
            ("retired", None),
            ("EMPLOYED", None),
        ],
    )
    def test_parse(self, raw: str | None, expected: EmploymentStatus | None) -> None:
        """Test that only the stored values map to a status."""
        assert EmploymentStatus.parse(raw) is expected

    def test_labels(self) -> None:
        """Test the human-readable labels."""
        assert EmploymentStatus.EMPLOYED.label == "Employed"
        assert EmploymentStatus.SELF_EMPLOYED.label == "Self-employed"


@pytest.mark.unit
class TestValueObjects:
    """TaxProfile and DueDateEntry are immutable values."""

    def test_tax_profile_defaults_to_empty(self) -> None:
        """Test that an empty profile has nothing set."""
        profile = TaxProfile()
        assert profile.employment_status is None
        assert profile.philhealth_number is None
        assert profile.sss_number is None
        assert profile.pagibig_number is None

    def test_tax_profile_is_frozen(self) -> None:
        """Test that profiles cannot be mutated."""
        profile = TaxProfile(sss_number="1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            profile.sss_number = "2"  # type: ignore[misc]

    def test_due_date_entry_equality(self) -> None:
        """Test that entries compare by value."""
        first = DueDateEntry(Agency.SSS, "x", date(2025, 1, 31), "1")
        second = DueDateEntry(Agency.SSS, "x", date(2025, 1, 31), "1")
        assert first == second

    def test_agency_values(self) -> None:
        """Test the agency names used in descriptions."""
        assert [agency.value for agency in Agency] == ["PhilHealth", "SSS", "Pag-IBIG"]
