from __future__ import annotations

from .client import ImplviewClient

__all__ = ["ImplviewClient"]
