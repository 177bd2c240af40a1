from __future__ import annotations

from .catalog import ImplementorCatalog, ImplementorGroup, SubjectTable
from .registry import Active, ConsumerAlreadyRegisteredError, ImplementorRegistry, Pending

__all__ = [
    "ImplementorRegistry",
    "ConsumerAlreadyRegisteredError",
    "Pending",
    "Active",
    "ImplementorCatalog",
    "ImplementorGroup",
    "SubjectTable",
]
