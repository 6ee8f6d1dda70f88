"""Concrete strategy implementations."""

from codesynth.strategies.loaders import (
    FileTemplateLoader,
)
from codesynth.strategies.renderers import (
    UnparseRenderer,
)
from codesynth.strategies.service import (
    ServiceSynthesizer,
)

__all__ = [
    "FileTemplateLoader",
    "UnparseRenderer",
    "ServiceSynthesizer",
]
