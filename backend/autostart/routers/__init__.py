"""
API Routers module.
"""
from autostart.routers import health

__all__ = ["health"]
