"""
Exceptions raised by the storage adapter and the query runtime loader.
"""


class AutostartError(Exception):
    """Base class for all autostart errors."""


class PermissionDeniedError(AutostartError):
    """The current subject may not read the requested collection or document."""

    def __init__(self, subject: str, path: str):
        self.subject = subject
        self.path = path
        super().__init__(f"Subject '{subject}' has no read access to '{path}'")


class TransactionError(AutostartError):
    """A transaction could not be started or committed."""


class QueryServiceUnavailableError(AutostartError):
    """No query runtime is attached to the broker."""


class QueryServiceLoadError(AutostartError):
    """The configured query runtime factory could not be imported."""
