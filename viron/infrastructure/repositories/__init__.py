"""Entity repositories built on ``BaseRepository``."""

from viron.infrastructure.repositories.personal_info import (
    PersonalInfoRepository,
    to_tax_profile,
)

__all__ = ["PersonalInfoRepository", "to_tax_profile"]
