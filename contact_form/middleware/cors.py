"""CORS middleware configuration"""
from fastapi.middleware.cors import CORSMiddleware
from contact_form.config import get_settings


def setup_cors(app):
    """
    Allow cross-origin JSON submissions from the configured origins

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
