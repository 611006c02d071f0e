"""Read and save a user's personal info and dependents.

The user id is taken from the path, or from ``?userId=`` / ``?clientId=``
(GET), or ``?userId=`` / the body's ``user_id`` (POST).
"""

from typing import Annotated

from fastapi import APIRouter, Query
from loguru import logger

from viron.api.schemas.personal_info import (
    DependentResponse,
    PersonalInfoRequest,
    PersonalInfoResponse,
)
from viron.core.exceptions import ValidationError
from viron.infrastructure.database.session import DatabaseSession
from viron.infrastructure.database.models import Dependent, PersonalInfo
from viron.infrastructure.repositories import PersonalInfoRepository

router = APIRouter(prefix="/api/personal-info", tags=["personal-info"])

UserIdQuery = Annotated[int | None, Query(alias="userId")]
ClientIdQuery = Annotated[int | None, Query(alias="clientId")]


def require_user_id(*candidates: int | None) -> int:
    """Return the first id given.

    Raises:
        ValidationError: If none was given.
    """
    for candidate in candidates:
        if candidate is not None:
            return candidate
    raise ValidationError("Missing userId")


def build_response(
    user_id: int, info: PersonalInfo | None, dependents: list[Dependent]
) -> PersonalInfoResponse:
    """Combine the stored record and dependents; a missing record is blank."""
    if info is None:
        response = PersonalInfoResponse(user_id=user_id)
    else:
        response = PersonalInfoResponse.model_validate(info)
    response.dependents = [DependentResponse.model_validate(d) for d in dependents]
    return response


async def _read(db: DatabaseSession, user_id: int) -> PersonalInfoResponse:
    repository = PersonalInfoRepository(db)
    info = await repository.get_by_user_id(user_id)
    dependents = await repository.get_dependents(user_id)

    logger.info(
        "Loaded personal info for user {} - found: {}, dependents: {}",
        user_id,
        info is not None,
        len(dependents),
    )
    return build_response(user_id, info, dependents)


async def _save(
    db: DatabaseSession, user_id: int, payload: PersonalInfoRequest
) -> PersonalInfoResponse:
    repository = PersonalInfoRepository(db)
    info = await repository.upsert(user_id, payload.profile_values())
    dependents = await repository.replace_dependents(
        user_id, payload.dependent_values()
    )

    logger.info(
        "Saved personal info for user {} with {} dependents", user_id, len(dependents)
    )
    return build_response(user_id, info, dependents)


@router.get("/{user_id}", response_model=PersonalInfoResponse)
async def read_personal_info(user_id: int, db: DatabaseSession) -> PersonalInfoResponse:
    """Return the user's personal info and dependents."""
    return await _read(db, user_id)


@router.get("", response_model=PersonalInfoResponse)
async def read_personal_info_by_query(
    db: DatabaseSession,
    user_id: UserIdQuery = None,
    client_id: ClientIdQuery = None,
) -> PersonalInfoResponse:
    """Same as ``GET /api/personal-info/{user_id}`` with the id in the query."""
    return await _read(db, require_user_id(user_id, client_id))


@router.post("/{user_id}", response_model=PersonalInfoResponse)
async def save_personal_info(
    user_id: int, payload: PersonalInfoRequest, db: DatabaseSession
) -> PersonalInfoResponse:
    """Create or replace the user's personal info and dependents."""
    return await _save(db, user_id, payload)


@router.post("", response_model=PersonalInfoResponse)
async def save_personal_info_by_query(
    payload: PersonalInfoRequest,
    db: DatabaseSession,
    user_id: UserIdQuery = None,
) -> PersonalInfoResponse:
    """Same as the path variant, with the id in the query or the body."""
    return await _save(db, require_user_id(user_id, payload.user_id), payload)
