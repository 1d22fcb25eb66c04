"""
Interface of the external query runtime.

The runtime that compiles and evaluates XQuery is provided by the
deployment and attached to the broker. Only the calls the startup trigger
makes are described here.
"""
import importlib
from enum import Enum
from typing import Any, Optional, Protocol

from autostart.exceptions import QueryServiceLoadError


class AccessContext(str, Enum):
    """Privilege scope a query context is created for."""
    TRIGGER = "trigger"


class ResultSequence(Protocol):
    def get_string_value(self) -> str: ...


class CompiledQuery(Protocol):
    ...


class QueryContext(Protocol):
    def set_module_load_path(self, path: str) -> None: ...

    def prepare_for_execution(self) -> None: ...

    def run_cleanup_tasks(self) -> None: ...


class QueryService(Protocol):
    def new_context(self, access: AccessContext) -> QueryContext: ...

    async def compile(self, context: QueryContext, source: Any) -> CompiledQuery: ...

    async def execute(
        self, compiled: CompiledQuery, context_sequence: Optional[ResultSequence]
    ) -> ResultSequence: ...


def load_query_service(factory_path: Optional[str]) -> Optional[QueryService]:
    """
    Build the query runtime from a "package.module:attribute" path.

    The attribute may be a class or any callable returning a QueryService.
    Returns None when no path is configured.
    """
    if not factory_path:
        return None

    module_name, sep, attr = factory_path.partition(":")
    if not sep or not module_name or not attr:
        raise QueryServiceLoadError(f"Expected 'module:attribute', got '{factory_path}'")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise QueryServiceLoadError(f"Cannot load query service '{factory_path}': {e}") from e

    return factory()
