"""HTTP boundary helpers."""

from property_registry.web.errors import register_exception_handlers

__all__ = ["register_exception_handlers"]
