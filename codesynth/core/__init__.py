"""Core configuration and factory components."""

from codesynth.core.config import Settings, get_settings
from codesynth.core.factory import ComponentFactory, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "get_factory",
]
