#!/usr/bin/env python3
"""
Service logger setup

Configures the standard library logging tree from LoggingConfig.
Modules keep using ``logging.getLogger(__name__)``; this only attaches
handlers and levels once per process.
"""
import logging
from typing import Optional

from core.config import LoggingConfig

_configured = set()


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service

    Args:
        service_name: Logger name (also used as the root of the service's tree)
        config: Logging configuration (loaded from environment if omitted)

    Returns:
        logging.Logger: Configured service logger
    """
    config = config or LoggingConfig.from_env()
    logger = logging.getLogger(service_name)

    if service_name in _configured:
        return logger

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(config.log_format)

    root = logging.getLogger()
    root.setLevel(level)

    if config.enable_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured.add(service_name)
    logger.debug(f"Logger configured for {service_name} ({config.environment}, level={config.log_level})")
    return logger
