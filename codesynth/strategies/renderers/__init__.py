"""Concrete renderer implementations."""

from codesynth.strategies.renderers.unparse import UnparseRenderer

__all__ = [
    "UnparseRenderer",
]
