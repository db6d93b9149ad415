"""
CroweCode Intelligence - entry point.

Configures logging and creates the app from environment settings.
"""
from .config import get_settings
from .server import create_app, setup_logging

settings = get_settings()
logger = setup_logging(settings)

app = create_app(settings=settings)
