#!/usr/bin/env python3
"""
Core Module

Shared infrastructure for the coral tracker services.

COMPONENTS:
    - config/: Environment-driven configuration (backend, logging)
    - logger.py: Service logger setup
    - service_client_base.py: httpx base class for backend REST clients

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger("album_service", settings.logging)
"""

__version__ = "1.0.0"
