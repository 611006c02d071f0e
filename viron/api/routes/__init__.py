"""API routers."""

from viron.api.routes.due_dates import router as due_dates_router
from viron.api.routes.personal_info import router as personal_info_router

__all__ = ["due_dates_router", "personal_info_router"]
