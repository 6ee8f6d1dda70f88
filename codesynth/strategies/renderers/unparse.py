"""Renderer built on ``ast.unparse``."""

import ast
import copy
import logging

from codesynth.interfaces.template import BaseRenderer

logger = logging.getLogger(__name__)


class UnparseRenderer(BaseRenderer):
    """Renders syntax trees with the standard library unparser.

    Output is deterministic for a given tree. Comments other than type
    comments are not preserved.
    """

    async def render(self, tree: ast.Module) -> str:
        """Render a module to source text ending with a newline.

        Args:
            tree: The module to render. It is not modified.

        Returns:
            The rendered source.
        """
        module = ast.fix_missing_locations(copy.deepcopy(tree))
        code = ast.unparse(module)
        logger.debug(f"Rendered {len(code)} characters")
        return f"{code}\n"
