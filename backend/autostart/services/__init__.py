"""
Service layer: script discovery, collection bootstrap and script execution.
"""
from autostart.services.bootstrap import create_autostart_collection
from autostart.services.discovery import get_scripts_in_startup_collection
from autostart.services.executor import execute_query
from autostart.services.parameters import get_parameters

__all__ = [
    "create_autostart_collection",
    "get_scripts_in_startup_collection",
    "execute_query",
    "get_parameters",
]
