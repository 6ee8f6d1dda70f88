"""Service module generation for entities.

Generates an async service class and its base class per entity from the
templates bundled in ``templates/``.
"""

from codesynth.strategies.service.mapping import build_service_mapping
from codesynth.strategies.service.synthesizer import ServiceSynthesizer

__all__ = [
    "ServiceSynthesizer",
    "build_service_mapping",
]
