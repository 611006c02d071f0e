"""End-to-end flows through middleware, routes, repositories and PostgreSQL."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from viron.api.constants import CORRELATION_ID_HEADER

USER_ID = 424242


@pytest.mark.integration
class TestPersonalInfoFlow:
    """Saving and reading personal info."""

    async def test_unknown_user_gets_blank_record(
        self, client_with_db: AsyncClient
    ) -> None:
        """Test the response for a user who never saved anything."""
        response = await client_with_db.get(f"/api/personal-info/{USER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == USER_ID
        assert body["id"] is None
        assert body["dependents"] == []

    async def test_save_then_read(self, client_with_db: AsyncClient) -> None:
        """Test that a saved record and its dependents are read back."""
        payload = {
            "userId": USER_ID,
            "full_name": "Juan dela Cruz",
            "birth_date": "1990-05-17",
            "employment_status": "self-employed",
            "sss_number": "",
            "dependents": [
                {"dep_name": "Ana", "dep_birth_date": "2015-03-02"},
                {"dep_name": "Ben", "dep_relationship": "son"},
            ],
        }

        saved = await client_with_db.post("/api/personal-info", json=payload)
        assert saved.status_code == 200
        assert saved.json()["id"] is not None

        response = await client_with_db.get(
            "/api/personal-info", params={"clientId": USER_ID}
        )

        body = response.json()
        assert body["full_name"] == "Juan dela Cruz"
        assert body["birth_date"] == "1990-05-17"
        assert body["employment_status"] == "self-employed"
        assert body["sss_number"] is None
        assert [d["dep_name"] for d in body["dependents"]] == ["Ana", "Ben"]

    async def test_resave_replaces_dependents(
        self, client_with_db: AsyncClient
    ) -> None:
        """Test that the second save updates the row and replaces dependents."""
        url = f"/api/personal-info/{USER_ID}"
        first = await client_with_db.post(
            url, json={"full_name": "Juan", "dependents": [{"dep_name": "Ana"}]}
        )
        second = await client_with_db.post(
            url, json={"full_name": "Juan Cruz", "dependents": [{"dep_name": "Cara"}]}
        )

        assert second.json()["id"] == first.json()["id"]
        body = (await client_with_db.get(url)).json()
        assert body["full_name"] == "Juan Cruz"
        assert [d["dep_name"] for d in body["dependents"]] == ["Cara"]

    async def test_missing_user_id(self, client_with_db: AsyncClient) -> None:
        """Test the 400 when no id is given anywhere."""
        response = await client_with_db.post("/api/personal-info", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing userId"


@pytest.mark.integration
class TestDueDatesFlow:
    """Due dates computed from stored personal info."""

    async def test_no_record_no_due_dates(self, client_with_db: AsyncClient) -> None:
        """Test the empty list for a user without personal info."""
        response = await client_with_db.get(f"/api/due-dates/{USER_ID}")

        assert response.status_code == 200
        assert response.json() == {"dueDates": []}

    async def test_employed_member(self, client_with_db: AsyncClient) -> None:
        """Test all three agencies for an employed member."""
        await client_with_db.post(
            f"/api/personal-info/{USER_ID}",
            json={
                "employment_status": "employed",
                "philhealth_number": "12-345678901-2",
                "sss_number": "34-1234567-8",
                "pagibig_number": "1212-3434-5656",
            },
        )

        correlation_id = str(uuid4())
        response = await client_with_db.get(
            f"/api/due-dates/{USER_ID}",
            headers={CORRELATION_ID_HEADER: correlation_id},
        )

        assert response.status_code == 200
        assert response.headers[CORRELATION_ID_HEADER] == correlation_id
        assert response.headers["x-frame-options"] == "DENY"
        due_dates = response.json()["dueDates"]
        assert [(d["agency"], d["dueDate"]) for d in due_dates] == [
            ("PhilHealth", "2025-09-15"),
            ("SSS", "2025-09-30"),
            ("Pag-IBIG", "2025-09-10"),
        ]
        assert due_dates[1]["membershipNumber"] == "34-1234567-8"

    async def test_self_employed_member(self, client_with_db: AsyncClient) -> None:
        """Test the self-employed schedule including the quarterly option."""
        await client_with_db.post(
            f"/api/personal-info/{USER_ID}",
            json={
                "employment_status": "self-employed",
                "philhealth_number": "12-345678901-9",
                "pagibig_number": "1212-3434-5656",
            },
        )

        response = await client_with_db.get(f"/api/due-dates/{USER_ID}")

        due_dates = response.json()["dueDates"]
        assert [(d["agency"], d["dueDate"]) for d in due_dates] == [
            ("PhilHealth", "2025-08-31"),
            ("Pag-IBIG", "2025-09-10"),
            ("Pag-IBIG", "2025-10-01"),
        ]
        assert "Quarterly Option" in due_dates[2]["description"]
