"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different loader and renderer implementations at runtime based on
configuration or environment variables.
"""

import logging

from codesynth.core.config import Settings, get_settings
from codesynth.interfaces.synthesis import BaseModuleSynthesizer
from codesynth.interfaces.template import BaseRenderer, BaseTemplateLoader
from codesynth.strategies.loaders import FileTemplateLoader
from codesynth.strategies.renderers import UnparseRenderer
from codesynth.strategies.service import ServiceSynthesizer

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        synthesizer = factory.get_service_synthesizer()
        modules = await synthesizer.synthesize("customer", "Customer", entity)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._loader_cache: BaseTemplateLoader | None = None
        self._renderer_cache: BaseRenderer | None = None
        self._service_synthesizer_cache: BaseModuleSynthesizer | None = None

    def get_template_loader(self, loader_type: str | None = None) -> BaseTemplateLoader:
        """Get a template loader instance based on the specified type.

        Args:
            loader_type: The loader type to instantiate. If None, uses settings.

        Returns:
            A BaseTemplateLoader implementation instance.

        Raises:
            ValueError: If the loader type is unknown.
        """
        if self._loader_cache is None or loader_type is not None:
            loader_type = loader_type or self._settings.loader_type

            logger.info(f"Instantiating template loader: {loader_type}")

            match loader_type:
                case "filesystem":
                    self._loader_cache = FileTemplateLoader(
                        encoding=self._settings.template_encoding,
                        cache=self._settings.template_cache_enabled,
                    )
                case _:
                    raise ValueError(
                        f"Unknown loader type: {loader_type}. "
                        f"Valid options: 'filesystem'"
                    )

        return self._loader_cache

    def get_renderer(self, renderer_type: str | None = None) -> BaseRenderer:
        """Get a renderer instance based on the specified type.

        Args:
            renderer_type: The renderer type to instantiate. If None, uses settings.

        Returns:
            A BaseRenderer implementation instance.

        Raises:
            ValueError: If the renderer type is unknown.
        """
        if self._renderer_cache is None or renderer_type is not None:
            renderer_type = renderer_type or self._settings.renderer_type

            logger.info(f"Instantiating renderer: {renderer_type}")

            match renderer_type:
                case "unparse":
                    self._renderer_cache = UnparseRenderer()
                case _:
                    raise ValueError(
                        f"Unknown renderer type: {renderer_type}. "
                        f"Valid options: 'unparse'"
                    )

        return self._renderer_cache

    def get_service_synthesizer(self) -> BaseModuleSynthesizer:
        """Get the service synthesizer wired with the configured strategies.

        Returns:
            A BaseModuleSynthesizer implementation instance.
        """
        if self._service_synthesizer_cache is None:
            logger.info("Instantiating service synthesizer")

            self._service_synthesizer_cache = ServiceSynthesizer(
                loader=self.get_template_loader(),
                renderer=self.get_renderer(),
                src_directory=self._settings.src_directory,
                template_dir=self._settings.template_dir,
                password_service_path=self._settings.password_service_path,
                prisma_util_path=self._settings.prisma_util_path,
            )

        return self._service_synthesizer_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._loader_cache = None
        self._renderer_cache = None
        self._service_synthesizer_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
