"""Adapters — side-effect bindings for model-issued actions.

Public re-exports for convenient access.
"""

from codeforge.adapters.base import Adapter, ExecutionContext
from codeforge.adapters.mock import MockAdapter
from codeforge.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
