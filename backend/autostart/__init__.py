"""
XQuery Autostart - runs stored and configured XQuery scripts once at database startup.
"""
from autostart.triggers import StartupTrigger, XQueryStartupTrigger, run_startup_triggers

__version__ = "0.1.0"

__all__ = ["StartupTrigger", "XQueryStartupTrigger", "run_startup_triggers"]
