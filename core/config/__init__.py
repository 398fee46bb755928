#!/usr/bin/env python3
"""Modular configuration system for the coral tracker

Configuration hierarchy:
- backend_config: Firebase project and REST endpoints
- logging_config: Logging configuration
- tracker_config: Top-level config combining the above
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .backend_config import BackendConfig
from .tracker_config import TrackerConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "production": "deployment/environments/production.env",
}
# Unlisted environments (testing) read the process environment only
env_file = env_files.get(env)
if env_file:
    load_dotenv(env_file, override=False)

# Create global settings instance
settings = TrackerConfig.from_env()

def get_settings() -> TrackerConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> TrackerConfig:
    """Reload settings from environment"""
    global settings
    settings = TrackerConfig.from_env()
    return settings

__all__ = [
    'TrackerConfig',
    'get_settings',
    'reload_settings',
    'settings',
    'LoggingConfig',
    'BackendConfig',
]
