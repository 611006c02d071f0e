"""Unit tests for the API request and response models."""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from viron.api.schemas.due_dates import DueDateItem, DueDatesResponse
from viron.api.schemas.personal_info import (
    DependentRequest,
    PersonalInfoRequest,
    PersonalInfoResponse,
)
from viron.domain.contributions import Agency, DueDateEntry


@pytest.mark.unit
class TestPersonalInfoRequest:
    """Normalization of submitted personal info."""

    def test_blank_strings_become_none(self) -> None:
        """Test that empty form fields are stored as null."""
        request = PersonalInfoRequest.model_validate(
            {"full_name": "", "sss_number": "", "birth_date": "", "tin": "123"}
        )

        assert request.full_name is None
        assert request.sss_number is None
        assert request.birth_date is None
        assert request.tin == "123"

    @pytest.mark.parametrize("status", ["", None])
    def test_blank_status_defaults_to_employed(self, status: str | None) -> None:
        """Test that a missing employment status falls back to employed."""
        request = PersonalInfoRequest.model_validate({"employment_status": status})
        assert request.employment_status == "employed"

    def test_status_omitted(self) -> None:
        """Test the default when the key is absent."""
        assert PersonalInfoRequest().employment_status == "employed"

    def test_unknown_status_rejected(self) -> None:
        """Test that only the two stored statuses are accepted."""
        with pytest.raises(PydanticValidationError):
            PersonalInfoRequest.model_validate({"employment_status": "retired"})

    @pytest.mark.parametrize("key", ["user_id", "userId"])
    def test_user_id_aliases(self, key: str) -> None:
        """Test both spellings of the user id."""
        assert PersonalInfoRequest.model_validate({key: "42"}).user_id == 42

    def test_profile_values(self) -> None:
        """Test that stored columns exclude the id and dependents."""
        request = PersonalInfoRequest.model_validate(
            {
                "userId": 1,
                "full_name": "Juan dela Cruz",
                "employment_status": "self-employed",
                "dependents": [{"dep_name": "Ana"}],
            }
        )

        values = request.profile_values()

        assert "user_id" not in values
        assert "dependents" not in values
        assert values["full_name"] == "Juan dela Cruz"
        assert values["employment_status"] == "self-employed"
        assert values["philhealth_number"] is None

    def test_dependent_values(self) -> None:
        """Test dependent rows, with blank fields nulled."""
        request = PersonalInfoRequest.model_validate(
            {
                "dependents": [
                    {
                        "dep_name": "Ana",
                        "dep_birth_date": "2015-03-02",
                        "dep_relationship": "",
                    }
                ]
            }
        )

        assert request.dependent_values() == [
            {
                "dep_name": "Ana",
                "dep_birth_date": date(2015, 3, 2),
                "dep_relationship": None,
            }
        ]

    def test_dependent_requires_name(self) -> None:
        """Test that a dependent without a name is rejected."""
        with pytest.raises(PydanticValidationError):
            DependentRequest.model_validate({"dep_name": ""})

    def test_membership_number_length(self) -> None:
        """Test the column length limit on membership numbers."""
        with pytest.raises(PydanticValidationError):
            PersonalInfoRequest.model_validate({"sss_number": "9" * 51})


@pytest.mark.unit
class TestResponses:
    """Wire shapes of responses."""

    def test_due_date_item_from_entry(self) -> None:
        """Test conversion and camelCase serialization."""
        entry = DueDateEntry(
            agency=Agency.PAGIBIG,
            description="Pag-IBIG contribution payment (Employed) - Form ER1",
            due_date=date(2025, 9, 10),
            membership_number="1212-3434-5656",
        )

        item = DueDateItem.from_entry(entry)

        assert item.model_dump(mode="json", by_alias=True) == {
            "agency": "Pag-IBIG",
            "description": "Pag-IBIG contribution payment (Employed) - Form ER1",
            "dueDate": "2025-09-10",
            "membershipNumber": "1212-3434-5656",
        }

    def test_due_dates_response_alias(self) -> None:
        """Test the top-level key."""
        assert DueDatesResponse().model_dump(by_alias=True) == {"dueDates": []}

    def test_blank_personal_info(self) -> None:
        """Test the record returned for a user without one."""
        response = PersonalInfoResponse(user_id=7)

        dumped = response.model_dump()
        assert dumped["user_id"] == 7
        assert dumped["id"] is None
        assert dumped["dependents"] == []
