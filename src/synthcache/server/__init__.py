"""HTTP server for synthcache."""

from synthcache.server.app import create_app

__all__ = ["create_app"]
