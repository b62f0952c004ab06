"""HTTP surface — thin FastAPI routes delegating to the services."""
