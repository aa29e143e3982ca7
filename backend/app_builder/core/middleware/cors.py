"""CORS configuration for the builder API."""

from app_builder.core.config import settings


def get_cors_config() -> dict:
    """Return CORS middleware kwargs for FastAPI.

    Credentials are allowed so the guest-id cookie travels with builder calls.
    """
    return {
        "allow_origins": settings.allowed_origins_list,
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "X-Request-Id",
        ],
        "expose_headers": ["X-Request-Id"],
    }
