"""Template loading and rendering interfaces.

The synthesis engine works on already-parsed syntax trees. Getting a tree
from storage and turning a finished tree back into text are collaborators
behind these abstract base classes.
"""

import ast
from abc import ABC, abstractmethod


class BaseTemplateLoader(ABC):
    """Abstract base class for template loading strategies.

    Implementations must hand out trees the caller is free to mutate:
    a cached template is never returned by reference.
    """

    @abstractmethod
    async def load(self, path: str) -> ast.Module:
        """Load and parse a template.

        Args:
            path: Location of the template source.

        Returns:
            A fresh parsed module for the template.

        Raises:
            FileNotFoundError: If the template doesn't exist.
            TemplateMalformedError: If the template cannot be parsed.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported template file extensions."""


class BaseRenderer(ABC):
    """Abstract base class for syntax tree rendering strategies."""

    @abstractmethod
    async def render(self, tree: ast.Module) -> str:
        """Render a syntax tree to source text.

        Args:
            tree: The module to render. Must not be modified.

        Returns:
            The source text. Rendering is deterministic for a given tree.
        """
