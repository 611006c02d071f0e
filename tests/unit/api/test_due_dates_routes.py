"""Unit tests for viron/api/routes/due_dates.py."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture, MockType
from sqlalchemy.exc import OperationalError

from viron.api.routes.due_dates import get_today, load_tax_profile
from viron.core.config import Settings
from viron.domain.contributions import EmploymentStatus, TaxProfile
from viron.infrastructure.database.models import PersonalInfo


@pytest.mark.unit
class TestGetDueDates:
    """GET /api/due-dates/{user_id}."""

    def test_no_record(self, client: TestClient) -> None:
        """Test that a user without personal info has no due dates."""
        response = client.get("/api/due-dates/7")

        assert response.status_code == 200
        assert response.json() == {"dueDates": []}

    def test_full_profile(
        self,
        client: TestClient,
        api_session: MockType,
    ) -> None:
        """Test the wire format for a self-employed member on 2025-08-20."""
        api_session.result.scalar_one_or_none.return_value = PersonalInfo(
            user_id=7,
            employment_status="self-employed",
            philhealth_number="1203",
            sss_number="34-1234567-8",
            pagibig_number="1212",
        )

        response = client.get("/api/due-dates/7")

        assert response.status_code == 200
        assert response.json() == {
            "dueDates": [
                {
                    "agency": "PhilHealth",
                    "description": (
                        "PhilHealth contribution payment (Self-employed) "
                        "- Form PMRF, PPP5"
                    ),
                    "dueDate": "2025-08-31",
                    "membershipNumber": "1203",
                },
                {
                    "agency": "SSS",
                    "description": (
                        "SSS contribution payment (Self-employed) - Form RS-1, RS-5"
                    ),
                    "dueDate": "2025-09-30",
                    "membershipNumber": "34-1234567-8",
                },
                {
                    "agency": "Pag-IBIG",
                    "description": (
                        "Pag-IBIG contribution payment (Self-employed) - Form MDF, POF"
                    ),
                    "dueDate": "2025-09-10",
                    "membershipNumber": "1212",
                },
                {
                    "agency": "Pag-IBIG",
                    "description": (
                        "Pag-IBIG contribution payment (Quarterly Option) "
                        "- Form MDF, POF"
                    ),
                    "dueDate": "2025-10-01",
                    "membershipNumber": "1212",
                },
            ]
        }

    def test_database_failure_yields_empty_list(
        self, client: TestClient, api_session: MockType
    ) -> None:
        """Test that a failed lookup is logged and treated as no profile."""
        api_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        response = client.get("/api/due-dates/7")

        assert response.status_code == 200
        assert response.json() == {"dueDates": []}
        api_session.rollback.assert_awaited_once()

    def test_invalid_user_id(self, client: TestClient) -> None:
        """Test that a non-numeric id is a validation error."""
        response = client.get("/api/due-dates/abc")

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.unit
class TestHelpers:
    """get_today and load_tax_profile."""

    def test_get_today_uses_configured_timezone(self, mocker: MockerFixture) -> None:
        """Test that the civil date is taken in Asia/Manila by default."""
        mock_datetime = mocker.patch("viron.api.routes.due_dates.datetime")
        manila = ZoneInfo("Asia/Manila")
        mock_datetime.now.return_value = datetime(
            2025, 12, 31, 17, 0, tzinfo=UTC
        ).astimezone(manila)

        assert get_today(Settings()) == date(2026, 1, 1)
        mock_datetime.now.assert_called_once_with(manila)

    async def test_load_tax_profile(self, mock_async_session: MockType) -> None:
        """Test conversion of the stored record."""
        mock_async_session.result.scalar_one_or_none.return_value = PersonalInfo(
            user_id=1, employment_status="employed", sss_number="9"
        )

        profile = await load_tax_profile(mock_async_session, 1)

        assert profile == TaxProfile(
            employment_status=EmploymentStatus.EMPLOYED, sss_number="9"
        )

    async def test_load_tax_profile_connection_error(
        self, mock_async_session: MockType, mocker: MockerFixture
    ) -> None:
        """Test that low-level connection errors are handled too."""
        mock_logger = mocker.patch("viron.api.routes.due_dates.logger")
        mock_async_session.execute.side_effect = ConnectionRefusedError("refused")

        profile = await load_tax_profile(mock_async_session, 1)

        assert profile == TaxProfile()
        mock_logger.warning.assert_called_once()
        mock_async_session.rollback.assert_awaited_once()
