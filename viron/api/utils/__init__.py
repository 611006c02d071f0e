"""Helpers shared by the API layer."""

from viron.api.utils.responses import ORJSONResponse

__all__ = ["ORJSONResponse"]
