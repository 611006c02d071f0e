"""Persistence for personal info records and their dependents."""

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from viron.domain.contributions import EmploymentStatus, TaxProfile
from viron.infrastructure.database.models import Dependent, PersonalInfo
from viron.infrastructure.database.repository import BaseRepository


class PersonalInfoRepository(BaseRepository[PersonalInfo]):
    """Reads and writes the single ``personal_info`` row of each user.

    Dependents are owned by the same user and handled here as well, since they
    are only ever written together with the personal info.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PersonalInfo)
        self._dependents = BaseRepository(session, Dependent)

    async def get_by_user_id(self, user_id: int) -> PersonalInfo | None:
        """Return the user's personal info, or None if never saved."""
        return await self.find_one_by(user_id=user_id)

    async def upsert(self, user_id: int, data: Mapping[str, Any]) -> PersonalInfo:
        """Insert the user's record, or update it when one already exists.

        Runs as a single ``INSERT ... ON CONFLICT (user_id) DO UPDATE`` so that
        concurrent first saves for the same user cannot both insert.

        Args:
            user_id: Owner of the record.
            data: Column values; ``user_id`` and ``id`` keys are ignored.

        Returns:
            PersonalInfo: The saved record.
        """
        values = {k: v for k, v in data.items() if k not in ("id", "user_id")}

        stmt = (
            pg_insert(PersonalInfo)
            .values(user_id=user_id, **values)
            .on_conflict_do_update(
                index_elements=[PersonalInfo.user_id],
                set_={**values, "updated_at": func.now()},
            )
            .returning(PersonalInfo)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        info: PersonalInfo = result.scalar_one()

        logger.info(
            "Saved personal info ID {} for user {} - fields: {}",
            info.id,
            user_id,
            list(values),
        )
        return info

    async def get_dependents(self, user_id: int) -> list[Dependent]:
        """Return the user's dependents in insertion order."""
        return await self._dependents.filter_by(user_id=user_id)

    async def replace_dependents(
        self, user_id: int, dependents: Iterable[Mapping[str, Any]]
    ) -> list[Dependent]:
        """Delete every dependent of the user and insert ``dependents`` instead.

        Args:
            user_id: Owner of the dependents.
            dependents: Column values for each new dependent.

        Returns:
            list[Dependent]: The newly inserted rows.
        """
        await self._dependents.delete_by(user_id=user_id)

        saved = [
            await self._dependents.create(Dependent(user_id=user_id, **values))
            for values in dependents
        ]
        logger.info("Stored {} dependents for user {}", len(saved), user_id)
        return saved


def to_tax_profile(info: PersonalInfo | None) -> TaxProfile:
    """Snapshot the fields the due-date engine reads.

    Args:
        info: Stored record, or None when the user has none.

    Returns:
        TaxProfile: Empty profile when ``info`` is None.
    """
    if info is None:
        return TaxProfile()

    return TaxProfile(
        employment_status=EmploymentStatus.parse(info.employment_status),
        philhealth_number=info.philhealth_number,
        sss_number=info.sss_number,
        pagibig_number=info.pagibig_number,
    )
