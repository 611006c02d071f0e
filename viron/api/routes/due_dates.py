"""Upcoming contribution due dates for a user."""

from datetime import date, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from viron.api.schemas.due_dates import DueDateItem, DueDatesResponse
from viron.core.config import Settings, get_settings
from viron.core.observability import trace_operation
from viron.domain.contributions import TaxProfile, compute_due_dates
from viron.infrastructure.database.session import DatabaseSession
from viron.infrastructure.repositories import PersonalInfoRepository, to_tax_profile

router = APIRouter(prefix="/api/due-dates", tags=["due-dates"])


def get_today(settings: Annotated[Settings, Depends(get_settings)]) -> date:
    """Current civil date in ``due_date_config.timezone``."""
    return datetime.now(ZoneInfo(settings.due_date_config.timezone)).date()


Today = Annotated[date, Depends(get_today)]


async def load_tax_profile(session: AsyncSession, user_id: int) -> TaxProfile:
    """Read the user's profile; a failed lookup counts as no profile.

    Args:
        session: Request database session.
        user_id: User whose personal info is read.

    Returns:
        TaxProfile: The stored profile, or an empty one when the user has no
            record or the database could not be read.
    """
    try:
        info = await PersonalInfoRepository(session).get_by_user_id(user_id)
    except (SQLAlchemyError, OSError) as e:
        logger.warning(
            "Could not load personal info for user {}, returning no due dates: {}",
            user_id,
            e,
        )
        await session.rollback()
        return TaxProfile()

    return to_tax_profile(info)


@router.get("/{user_id}", response_model=DueDatesResponse)
async def get_due_dates(
    user_id: int, db: DatabaseSession, today: Today
) -> DueDatesResponse:
    """List the user's contribution payments due today or later."""
    profile = await load_tax_profile(db, user_id)

    with trace_operation("due_dates.compute", user_id=user_id) as span:
        entries = compute_due_dates(profile, today)
        span.set_attribute("due_dates.count", len(entries))

    logger.debug(
        "Computed {} due dates for user {} as of {}", len(entries), user_id, today
    )
    return DueDatesResponse(due_dates=[DueDateItem.from_entry(e) for e in entries])
