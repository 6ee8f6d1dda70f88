"""Abstract base classes and data types for code synthesis."""

from codesynth.interfaces.entity import (
    DataType,
    Entity,
    EntityField,
    Module,
)
from codesynth.interfaces.synthesis import (
    BaseModuleSynthesizer,
    InvalidIdentifierError,
    MemberNotFoundError,
    PathResolutionError,
    SynthesisError,
    TargetNotFoundError,
    TemplateMalformedError,
    UnmappedRequiredPlaceholderError,
)
from codesynth.interfaces.template import BaseRenderer, BaseTemplateLoader

__all__ = [
    "BaseModuleSynthesizer",
    "BaseRenderer",
    "BaseTemplateLoader",
    "DataType",
    "Entity",
    "EntityField",
    "InvalidIdentifierError",
    "MemberNotFoundError",
    "Module",
    "PathResolutionError",
    "SynthesisError",
    "TargetNotFoundError",
    "TemplateMalformedError",
    "UnmappedRequiredPlaceholderError",
]
