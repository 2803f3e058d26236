"""HTTP API for submitting and monitoring transcodes."""

from vtp.server.app import create_app, create_service

__all__ = ["create_app", "create_service"]
