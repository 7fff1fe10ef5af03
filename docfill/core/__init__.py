"""Core configuration and factory components."""

from docfill.core.config import Settings, get_settings
from docfill.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
