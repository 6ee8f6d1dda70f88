"""Module synthesis interfaces and the error taxonomy.

Every error raised while synthesizing an entity derives from
``SynthesisError`` and only concerns that entity: callers handling several
entities can catch it and continue with the rest.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from codesynth.interfaces.entity import Entity, Module


class SynthesisError(Exception):
    """Base exception for failures while synthesizing an entity."""

    pass


class TemplateMalformedError(SynthesisError):
    """Exception raised when a template doesn't match its expected shape."""

    pass


class TargetNotFoundError(TemplateMalformedError):
    """Exception raised when a class cannot be found by its identifier."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Class declaration '{name}' not found in template")
        self.name = name


class MemberNotFoundError(TemplateMalformedError):
    """Exception raised when a class lacks an expected member."""

    def __init__(self, class_name: str, member: str) -> None:
        super().__init__(f"Member '{member}' not found in class '{class_name}'")
        self.class_name = class_name
        self.member = member


class UnmappedRequiredPlaceholderError(SynthesisError):
    """Exception raised when a required placeholder survives interpolation."""

    def __init__(self, placeholders: Iterable[str]) -> None:
        self.placeholders = sorted(placeholders)
        super().__init__(
            f"Required placeholders left unmapped: {', '.join(self.placeholders)}"
        )


class PathResolutionError(SynthesisError):
    """Exception raised when an import path between two modules can't be computed."""

    def __init__(self, from_path: str, to_path: str, reason: str) -> None:
        super().__init__(
            f"Cannot resolve import from '{from_path}' to '{to_path}': {reason}"
        )
        self.from_path = from_path
        self.to_path = to_path
        self.reason = reason


class InvalidIdentifierError(SynthesisError):
    """Exception raised when an entity name cannot be used as a Python identifier."""

    def __init__(self, value: str, role: str) -> None:
        super().__init__(f"Entity {role} '{value}' is not a valid Python identifier")
        self.value = value
        self.role = role


class BaseModuleSynthesizer(ABC):
    """Abstract base class for entity module synthesis strategies.

    A synthesizer turns one entity into the set of coupled modules it owns.
    The modules of one call are produced together and never independently.
    """

    @abstractmethod
    async def synthesize(
        self,
        entity_name: str,
        entity_type: str,
        entity: Entity,
    ) -> list[Module]:
        """Synthesize the modules for an entity.

        Args:
            entity_name: Name used for paths and the client delegate.
            entity_type: Type name used for class and argument type names.
            entity: The entity metadata.

        Returns:
            The generated modules.

        Raises:
            SynthesisError: If synthesis fails for this entity.
        """
