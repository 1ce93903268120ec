"""HTTP API: FastAPI application, routes and middleware."""
