"""API routers and dependencies."""
