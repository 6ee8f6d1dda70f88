"""Concrete template loader implementations."""

from codesynth.strategies.loaders.filesystem import FileTemplateLoader

__all__ = [
    "FileTemplateLoader",
]
