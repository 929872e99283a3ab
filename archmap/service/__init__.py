"""HTTP service mode for archmap."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
