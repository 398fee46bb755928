#!/usr/bin/env python3
"""Coral tracker main configuration

Combines the backend and logging sub-configs.
"""
import os
from dataclasses import dataclass, field

from .backend_config import BackendConfig
from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class TrackerConfig:
    """Main configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)

    @classmethod
    def from_env(cls) -> 'TrackerConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            logging=LoggingConfig.from_env(),
            backend=BackendConfig.from_env(),
        )
