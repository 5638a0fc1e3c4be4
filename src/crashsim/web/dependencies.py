"""FastAPI dependency injection providers."""

from fastapi import Request

from crashsim.config import Settings


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    return request.app.state.settings
