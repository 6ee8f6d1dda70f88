"""Unit tests for the template loader and renderer strategies."""

import ast
import asyncio

import pytest

from codesynth.interfaces.synthesis import TemplateMalformedError
from codesynth.strategies.loaders import FileTemplateLoader
from codesynth.strategies.renderers import UnparseRenderer


# =============================================================================
# File Template Loader Tests
# =============================================================================


class TestFileTemplateLoader:
    """Test suite for FileTemplateLoader."""

    @pytest.fixture
    def loader(self):
        """Create a caching loader."""
        return FileTemplateLoader()

    @pytest.fixture
    def template(self, tmp_path):
        """Write a small template to disk."""
        path = tmp_path / "service.template.py"
        path.write_text(
            "class SERVICE:\n    def run(self) -> int:  # type: ignore[override]\n        return 1\n",
            encoding="utf-8",
        )
        return path

    def test_supported_extensions(self, loader):
        """Test that only Python templates are supported."""
        assert loader.supported_extensions == {".py"}

    def test_load_nonexistent_file(self, loader):
        """Test that loading a missing template raises FileNotFoundError."""

        async def run_test():
            with pytest.raises(FileNotFoundError):
                await loader.load("/nonexistent/service.template.py")

        asyncio.run(run_test())

    def test_load_invalid_python(self, loader, tmp_path):
        """Test that a template with a syntax error is malformed."""
        path = tmp_path / "broken.template.py"
        path.write_text("def broken(:\n", encoding="utf-8")

        async def run_test():
            with pytest.raises(TemplateMalformedError):
                await loader.load(str(path))

        asyncio.run(run_test())

    def test_load_keeps_type_ignores(self, loader, template):
        """Test that ignore markers are parsed."""
        tree = asyncio.run(loader.load(str(template)))

        assert isinstance(tree, ast.Module)
        assert len(tree.type_ignores) == 1

    def test_cached_loads_are_independent(self, loader, template):
        """Test that each load returns a private tree."""

        async def run_test():
            first = await loader.load(str(template))
            first.body[0].name = "Changed"
            second = await loader.load(str(template))
            return first, second

        first, second = asyncio.run(run_test())

        assert first is not second
        assert second.body[0].name == "SERVICE"

    def test_cache_survives_file_changes(self, loader, template):
        """Test that cached templates are not reread until cleared."""
        asyncio.run(loader.load(str(template)))
        template.write_text("class OTHER:\n    pass\n", encoding="utf-8")

        cached = asyncio.run(loader.load(str(template)))
        loader.clear_cache()
        reloaded = asyncio.run(loader.load(str(template)))

        assert cached.body[0].name == "SERVICE"
        assert reloaded.body[0].name == "OTHER"

    def test_uncached_loader_rereads(self, template):
        """Test that a loader without cache reads the file every time."""
        loader = FileTemplateLoader(cache=False)
        asyncio.run(loader.load(str(template)))
        template.write_text("class OTHER:\n    pass\n", encoding="utf-8")

        assert asyncio.run(loader.load(str(template))).body[0].name == "OTHER"


# =============================================================================
# Unparse Renderer Tests
# =============================================================================


class TestUnparseRenderer:
    """Test suite for UnparseRenderer."""

    @pytest.fixture
    def renderer(self):
        """Create a renderer."""
        return UnparseRenderer()

    def test_render_ends_with_newline(self, renderer):
        """Test the trailing newline of rendered modules."""
        code = asyncio.run(renderer.render(ast.parse("x = 1")))

        assert code == "x = 1\n"

    def test_render_fills_missing_locations(self, renderer):
        """Test that built nodes without positions render."""
        module = ast.Module(
            body=[
                ast.Assign(
                    targets=[ast.Name(id="x", ctx=ast.Store())],
                    value=ast.Constant(value=1),
                    type_comment=None,
                )
            ],
            type_ignores=[],
        )

        assert asyncio.run(renderer.render(module)) == "x = 1\n"

    def test_render_is_deterministic(self, renderer):
        """Test that rendering twice gives the same text."""
        module = ast.parse("class A:\n    def run(self):\n        return {'a': 1}\n")

        assert asyncio.run(renderer.render(module)) == asyncio.run(renderer.render(module))
