"""
API gateway package.
Exports create_app() and the ServiceContainer used to wire the core.
"""
from .app import create_app
from .container import ServiceContainer

__all__ = ["create_app", "ServiceContainer"]
