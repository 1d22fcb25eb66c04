"""
Startup triggers fired once the database is up.
"""
from autostart.triggers.base import StartupTrigger, run_startup_triggers
from autostart.triggers.xquery_startup import XQueryStartupTrigger

__all__ = ["StartupTrigger", "run_startup_triggers", "XQueryStartupTrigger"]
