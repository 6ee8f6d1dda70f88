"""Syntax tree rewriting utilities for template-driven code synthesis."""

from codesynth.strategies.codegen.imports import (
    add_imports,
    import_names,
    relative_import_path,
)
from codesynth.strategies.codegen.interpolate import (
    assert_placeholders_resolved,
    find_placeholders,
    interpolate,
)
from codesynth.strategies.codegen.mutators import (
    Collaborator,
    ImportTarget,
    InjectionDecision,
    InjectionState,
    add_identifier_to_super_call,
    add_injectable_dependency,
    apply_injection,
    decide_injection,
    get_class_declaration_by_id,
    mark_methods_async,
)
from codesynth.strategies.codegen.scaffold import strip_scaffold

__all__ = [
    "Collaborator",
    "ImportTarget",
    "InjectionDecision",
    "InjectionState",
    "add_identifier_to_super_call",
    "add_imports",
    "add_injectable_dependency",
    "apply_injection",
    "assert_placeholders_resolved",
    "decide_injection",
    "find_placeholders",
    "get_class_declaration_by_id",
    "import_names",
    "interpolate",
    "mark_methods_async",
    "relative_import_path",
    "strip_scaffold",
]
