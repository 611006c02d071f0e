"""HTTP layer: FastAPI application, routes, schemas and middleware."""
