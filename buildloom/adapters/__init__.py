"""Adapters — tool bindings for the task runner.

Public re-exports for convenient access.
"""

from buildloom.adapters.base import Adapter, ExecutionContext
from buildloom.adapters.mock import MockAdapter
from buildloom.adapters.registry import AdapterRegistry, create_default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "create_default_registry",
]
