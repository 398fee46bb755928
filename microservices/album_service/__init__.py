"""
Album Service

Album and photo synchronization for the coral growth tracker.
Handles sign-in, album maps, photo uploads and date timelines on top of a
Firebase backend.
"""

__version__ = "1.0.0"
__service_name__ = "album_service"
