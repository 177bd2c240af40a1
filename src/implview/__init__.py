from __future__ import annotations

from .core.catalog import ImplementorCatalog, SubjectTable
from .core.registry import ConsumerAlreadyRegisteredError, ImplementorRegistry
from .io.jsdata import ImplementorsFormatError, parse_implementors_js, render_implementors_js
from .io.loader import load_implementors_dir
from .runtime.server import ImplviewServer, run
from .sdk.client import ImplviewClient

__all__ = [
    "run",
    "ImplviewServer",
    "ImplviewClient",
    "ImplementorRegistry",
    "ConsumerAlreadyRegisteredError",
    "ImplementorCatalog",
    "SubjectTable",
    "ImplementorsFormatError",
    "parse_implementors_js",
    "render_implementors_js",
    "load_implementors_dir",
]
