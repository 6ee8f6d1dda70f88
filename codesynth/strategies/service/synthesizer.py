"""Service module synthesis.

Produces, for one entity, a concrete service module and the base module it
inherits from. The two are always generated together: the concrete module
imports the base through a path relative to its own location, and both
receive the same collaborator injection decision.
"""

import ast
import asyncio
import logging
from pathlib import Path

from codesynth.interfaces.entity import Entity, Module
from codesynth.interfaces.synthesis import (
    BaseModuleSynthesizer,
    InvalidIdentifierError,
    SynthesisError,
)
from codesynth.interfaces.template import BaseRenderer, BaseTemplateLoader
from codesynth.strategies.codegen.imports import (
    add_imports,
    import_names,
    relative_import_path,
)
from codesynth.strategies.codegen.interpolate import (
    assert_placeholders_resolved,
    interpolate,
)
from codesynth.strategies.codegen.mutators import (
    Collaborator,
    ImportTarget,
    InjectionDecision,
    apply_injection,
    decide_injection,
)
from codesynth.strategies.codegen.naming import (
    create_service_base_id,
    create_service_id,
    is_valid_identifier,
)
from codesynth.strategies.codegen.scaffold import strip_scaffold
from codesynth.strategies.service.mapping import (
    REQUIRED_PLACEHOLDERS,
    TRANSFORM_STRING_FIELD_UPDATE_INPUT,
    build_service_mapping,
)

logger = logging.getLogger(__name__)

TEMPLATES_DIRECTORY = Path(__file__).parent / "templates"
SERVICE_TEMPLATE = "service.template.py"
SERVICE_BASE_TEMPLATE = "service_base.template.py"

PASSWORD_SERVICE_TYPE = "PasswordService"
PASSWORD_SERVICE_MEMBER = "password_service"
PASSWORD_FIELD_ASYNC_METHODS = frozenset({"create", "update"})


class ServiceSynthesizer(BaseModuleSynthesizer):
    """Generates the service and service base modules of an entity.

    Example:
        ```python
        synthesizer = ServiceSynthesizer(FileTemplateLoader(), UnparseRenderer())
        service, service_base = await synthesizer.synthesize(
            "customer", "Customer", entity
        )
        ```
    """

    def __init__(
        self,
        loader: BaseTemplateLoader,
        renderer: BaseRenderer,
        src_directory: str = "src",
        template_dir: Path | None = None,
        password_service_path: str = "auth/password_service.py",
        prisma_util_path: str = "prisma_util.py",
    ) -> None:
        """Initialize the synthesizer.

        Args:
            loader: Strategy loading template trees.
            renderer: Strategy rendering finished trees.
            src_directory: Root directory of the generated sources.
            template_dir: Directory holding the service templates. Defaults
                to the bundled templates.
            password_service_path: Location of the password service module,
                relative to ``src_directory``.
            prisma_util_path: Location of the module defining the update
                transform helper, relative to ``src_directory``.
        """
        self._loader = loader
        self._renderer = renderer
        self._src_directory = src_directory.rstrip("/")
        self._template_dir = template_dir or TEMPLATES_DIRECTORY
        self._collaborator = Collaborator(
            member_name=PASSWORD_SERVICE_MEMBER,
            type_name=PASSWORD_SERVICE_TYPE,
            module_path=f"{self._src_directory}/{password_service_path}",
            visibility="protected",
        )
        self._transform_helper = ImportTarget(
            name=TRANSFORM_STRING_FIELD_UPDATE_INPUT,
            module_path=f"{self._src_directory}/{prisma_util_path}",
        )

    @property
    def collaborator(self) -> Collaborator:
        return self._collaborator

    def module_paths(self, entity_name: str) -> tuple[str, str]:
        """Return the destination paths of the service and its base."""
        return (
            f"{self._src_directory}/{entity_name}/{entity_name}_service.py",
            f"{self._src_directory}/{entity_name}/base/{entity_name}_service_base.py",
        )

    async def synthesize(
        self,
        entity_name: str,
        entity_type: str,
        entity: Entity,
    ) -> list[Module]:
        """Generate the service and service base modules of an entity.

        Args:
            entity_name: Name used for module paths and the client delegate.
            entity_type: Type name used for class and argument type names.
            entity: The entity metadata.

        Returns:
            The service module followed by the service base module.

        Raises:
            SynthesisError: If a template is malformed, a required placeholder
                is left unmapped, an import path cannot be resolved or a
                name is not a valid Python identifier.
        """
        if not is_valid_identifier(entity_name):
            raise InvalidIdentifierError(entity_name, "name")
        if not is_valid_identifier(entity_type):
            raise InvalidIdentifierError(entity_type, "type name")

        module_path, module_base_path = self.module_paths(entity_name)

        logger.info(f"Synthesizing service modules for entity: {entity_name}")

        try:
            service_id = create_service_id(entity_type)
            service_base_id = create_service_base_id(entity_type)
            sensitive_fields = [field for field in entity.fields if field.is_sensitive]

            mapping = build_service_mapping(
                entity_name,
                entity_type,
                sensitive_fields,
                self._collaborator,
                self._transform_helper.name,
            )
            decision = decide_injection(
                sensitive_fields,
                self._collaborator,
                PASSWORD_FIELD_ASYNC_METHODS,
            )

            service_file, service_base_file = await asyncio.gather(
                self._loader.load(str(self._template_dir / SERVICE_TEMPLATE)),
                self._loader.load(str(self._template_dir / SERVICE_BASE_TEMPLATE)),
            )

            modules = [
                await self._create_service_module(
                    service_file,
                    mapping,
                    decision,
                    service_id,
                    service_base_id,
                    module_path,
                    module_base_path,
                ),
                await self._create_service_base_module(
                    service_base_file,
                    mapping,
                    decision,
                    service_base_id,
                    module_base_path,
                ),
            ]

        except SynthesisError:
            logger.error(f"Service synthesis failed for entity: {entity_name}", exc_info=True)
            raise

        logger.info(
            f"Synthesized {len(modules)} modules for entity {entity_name} "
            f"({len(sensitive_fields)} sensitive fields)"
        )
        return modules

    async def _create_service_module(
        self,
        file: ast.Module,
        mapping: dict[str, ast.expr],
        decision: InjectionDecision,
        service_id: ast.Name,
        service_base_id: ast.Name,
        module_path: str,
        module_base_path: str,
    ) -> Module:
        interpolate(file, mapping)
        assert_placeholders_resolved(file, REQUIRED_PLACEHOLDERS)

        # import the base class
        add_imports(
            file,
            [import_names([service_base_id], relative_import_path(module_path, module_base_path))],
        )

        # only overrides present in the subclass become async
        apply_injection(
            file,
            decision,
            class_name=service_id.id,
            module_path=module_path,
            thread_to_super=True,
            require_async_methods=False,
        )

        strip_scaffold(file)

        return Module(path=module_path, code=await self._renderer.render(file))

    async def _create_service_base_module(
        self,
        file: ast.Module,
        mapping: dict[str, ast.expr],
        decision: InjectionDecision,
        service_base_id: ast.Name,
        module_base_path: str,
    ) -> Module:
        interpolate(file, mapping)
        assert_placeholders_resolved(file, REQUIRED_PLACEHOLDERS)

        apply_injection(
            file,
            decision,
            class_name=service_base_id.id,
            module_path=module_base_path,
            helper_imports=[self._transform_helper],
            require_async_methods=True,
        )

        strip_scaffold(file)

        return Module(path=module_base_path, code=await self._renderer.render(file))
