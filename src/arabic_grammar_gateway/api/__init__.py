"""FastAPI HTTP surface: routers, dependencies, middleware and error handlers."""
