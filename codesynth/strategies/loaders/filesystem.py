"""Filesystem template loader.

Reads Python templates from disk and parses them, keeping type comments
so ``# type: ignore`` markers are visible to the scaffold stripper.
"""

import ast
import asyncio
import copy
import logging
from pathlib import Path

from codesynth.interfaces.synthesis import TemplateMalformedError
from codesynth.interfaces.template import BaseTemplateLoader

logger = logging.getLogger(__name__)


class FileTemplateLoader(BaseTemplateLoader):
    """Loads templates from the local filesystem.

    Parsed templates are cached per resolved path. The cache is only ever
    read after a template is first parsed; every caller receives its own
    deep copy, so concurrent syntheses never share nodes.
    """

    def __init__(
        self,
        encoding: str = "utf-8",
        cache: bool = True,
    ) -> None:
        """Initialize the loader.

        Args:
            encoding: The character encoding of template files.
            cache: Whether parsed templates are kept between loads.
        """
        self._encoding = encoding
        self._cache_enabled = cache
        self._cache: dict[Path, ast.Module] = {}

    async def load(self, path: str) -> ast.Module:
        """Load a template and return a private copy of its tree.

        Args:
            path: Path to the template file.

        Returns:
            The parsed module.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            TemplateMalformedError: If the file isn't valid Python.
        """
        template_path = Path(path).resolve()

        cached = self._cache.get(template_path)
        if cached is not None:
            return copy.deepcopy(cached)

        if not template_path.exists():
            raise FileNotFoundError(f"Template not found: {path}")

        logger.info(f"Loading template: {template_path}")
        source = await asyncio.to_thread(template_path.read_text, encoding=self._encoding)

        try:
            tree = ast.parse(source, filename=str(template_path), type_comments=True)
        except SyntaxError as e:
            logger.error(f"Template {template_path} is not valid Python: {e}")
            raise TemplateMalformedError(f"Cannot parse template {path}: {e}") from e

        if self._cache_enabled:
            self._cache.setdefault(template_path, tree)
            return copy.deepcopy(self._cache[template_path])
        return tree

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.debug("Template cache cleared")

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".py"}
