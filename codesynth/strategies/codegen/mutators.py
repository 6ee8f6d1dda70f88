"""Conditional structural changes applied to interpolated templates.

When an entity has sensitive fields, every generated class gains a
constructor-injected collaborator, the mutation methods become coroutines
and the collaborator's module is imported. The decision is computed once
per entity and shared by all of its modules, and ``apply_injection`` walks
an explicit state machine so each module branches the same way.
"""

import ast
import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from codesynth.interfaces.entity import EntityField
from codesynth.interfaces.synthesis import (
    MemberNotFoundError,
    SynthesisError,
    TargetNotFoundError,
)
from codesynth.strategies.codegen.builders import member_expression, name
from codesynth.strategies.codegen.imports import (
    add_imports,
    import_names,
    relative_import_path,
)

logger = logging.getLogger(__name__)

CONSTRUCTOR = "__init__"
VISIBILITY_PREFIXES = {"public": "", "protected": "_", "private": "__"}
AWAITABLE_WRAPPERS = frozenset({"Awaitable", "Coroutine"})


class InjectionState(str, enum.Enum):
    """States a module goes through while collaborators are injected."""

    BASE = "base"
    SENSITIVE_FIELDS_CHECKED = "sensitive-fields-checked"
    NO_CHANGE = "no-change"
    COLLABORATOR_INJECTED = "collaborator-injected"
    FINALIZED = "finalized"


_TRANSITIONS: dict[InjectionState, frozenset[InjectionState]] = {
    InjectionState.BASE: frozenset({InjectionState.SENSITIVE_FIELDS_CHECKED}),
    InjectionState.SENSITIVE_FIELDS_CHECKED: frozenset(
        {InjectionState.NO_CHANGE, InjectionState.COLLABORATOR_INJECTED}
    ),
    InjectionState.NO_CHANGE: frozenset({InjectionState.FINALIZED}),
    InjectionState.COLLABORATOR_INJECTED: frozenset({InjectionState.FINALIZED}),
    InjectionState.FINALIZED: frozenset(),
}


class InjectionStateMachine:
    """Tracks the injection state of one module."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.state = InjectionState.BASE
        self.history: list[InjectionState] = [InjectionState.BASE]

    def transition(self, target: InjectionState) -> None:
        """Move to ``target``.

        Raises:
            SynthesisError: If the transition is not allowed.
        """
        if target not in _TRANSITIONS[self.state]:
            raise SynthesisError(
                f"Illegal injection transition for {self.label}: "
                f"{self.state.value} -> {target.value}"
            )
        logger.debug(f"{self.label}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)


@dataclass(frozen=True)
class Collaborator:
    """A service injected into generated classes.

    Attributes:
        member_name: Constructor parameter name.
        type_name: Class name of the collaborator.
        module_path: Destination path of the module defining the class.
        visibility: ``public``, ``protected`` or ``private``.
        method_name: Method invoked to transform values.
    """

    member_name: str
    type_name: str
    module_path: str
    visibility: str = "protected"
    method_name: str = "hash"

    def __post_init__(self) -> None:
        if self.visibility not in VISIBILITY_PREFIXES:
            raise ValueError(
                f"Unknown visibility: {self.visibility}. "
                f"Valid options: {', '.join(VISIBILITY_PREFIXES)}"
            )

    @property
    def attribute_name(self) -> str:
        return f"{VISIBILITY_PREFIXES[self.visibility]}{self.member_name}"

    def method_expression(self) -> ast.expr:
        """Build ``self.<attribute>.<method>``."""
        return member_expression("self", self.attribute_name, self.method_name)


@dataclass(frozen=True)
class ImportTarget:
    """A symbol and the destination path of the module defining it."""

    name: str
    module_path: str


@dataclass(frozen=True)
class InjectionDecision:
    """The per-entity outcome of the sensitive field check."""

    collaborator: Collaborator | None = None
    async_methods: frozenset[str] = frozenset()

    @property
    def injects(self) -> bool:
        return self.collaborator is not None


def decide_injection(
    sensitive_fields: Sequence[EntityField],
    collaborator: Collaborator,
    async_methods: Iterable[str],
) -> InjectionDecision:
    """Decide once whether an entity's modules need the collaborator."""
    if not sensitive_fields:
        return InjectionDecision()
    return InjectionDecision(
        collaborator=collaborator,
        async_methods=frozenset(async_methods),
    )


def get_class_declaration_by_id(module: ast.Module, class_id: ast.Name | str) -> ast.ClassDef:
    """Find a top-level class by name.

    Raises:
        TargetNotFoundError: If no such class exists.
    """
    class_name = class_id.id if isinstance(class_id, ast.Name) else class_id
    for statement in module.body:
        if isinstance(statement, ast.ClassDef) and statement.name == class_name:
            return statement
    raise TargetNotFoundError(class_name)


def _find_method(
    class_def: ast.ClassDef, method_name: str
) -> ast.FunctionDef | ast.AsyncFunctionDef | None:
    for member in class_def.body:
        if isinstance(member, (ast.FunctionDef, ast.AsyncFunctionDef)) and member.name == method_name:
            return member
    return None


def _is_super_init_call(node: ast.AST) -> bool:
    match node:
        case ast.Call(
            func=ast.Attribute(
                value=ast.Call(func=ast.Name(id="super")),
                attr="__init__",
            )
        ):
            return True
    return False


def _find_super_call(method: ast.FunctionDef | ast.AsyncFunctionDef) -> ast.Call | None:
    for node in ast.walk(method):
        if _is_super_init_call(node):
            return node
    return None


def _new_constructor() -> ast.FunctionDef:
    return ast.FunctionDef(
        name=CONSTRUCTOR,
        args=ast.arguments(
            posonlyargs=[],
            args=[ast.arg(arg="self", annotation=None)],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=[],
        decorator_list=[],
        returns=ast.Constant(value=None),
        type_comment=None,
    )


def _is_ellipsis(statement: ast.stmt) -> bool:
    match statement:
        case ast.Expr(value=ast.Constant(value=value)):
            return value is Ellipsis
    return False


def _assigns_attribute(statement: ast.stmt, attribute: str) -> bool:
    match statement:
        case ast.Assign(targets=[ast.Attribute(value=ast.Name(id="self"), attr=attr)]):
            return attr == attribute
        case ast.AnnAssign(target=ast.Attribute(value=ast.Name(id="self"), attr=attr)):
            return attr == attribute
    return False


def add_injectable_dependency(
    class_def: ast.ClassDef,
    member_name: str,
    type_id: ast.Name,
    visibility: str = "protected",
) -> None:
    """Inject a collaborator through the class constructor.

    Adds a ``member_name: Type`` constructor parameter and stores it on
    ``self`` under a name prefixed according to ``visibility``. The
    assignment follows the ``super().__init__`` call when there is one.
    Nothing is added twice.
    """
    attribute = f"{VISIBILITY_PREFIXES[visibility]}{member_name}"
    constructor = _find_method(class_def, CONSTRUCTOR)
    if constructor is None:
        constructor = _new_constructor()
        docstring_offset = 1 if ast.get_docstring(class_def, clean=False) is not None else 0
        class_def.body.insert(docstring_offset, constructor)

    arguments = constructor.args
    declared = {arg.arg for arg in [*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs]}
    if member_name not in declared:
        parameter = ast.arg(arg=member_name, annotation=ast.Name(id=type_id.id, ctx=ast.Load()))
        if arguments.defaults or arguments.vararg is not None:
            arguments.kwonlyargs.append(parameter)
            arguments.kw_defaults.append(None)
        else:
            arguments.args.append(parameter)

    if any(_assigns_attribute(statement, attribute) for statement in constructor.body):
        return

    assignment = ast.Assign(
        targets=[ast.Attribute(value=name("self"), attr=attribute, ctx=ast.Store())],
        value=name(member_name),
        type_comment=None,
    )
    body = [statement for statement in constructor.body if not _is_ellipsis(statement)]
    position = len(body)
    for index, statement in enumerate(body):
        if any(_is_super_init_call(node) for node in ast.walk(statement)):
            position = index + 1
            break
    body.insert(position, assignment)
    constructor.body = body
    logger.debug(f"Injected {member_name}: {type_id.id} into {class_def.name}")


def add_identifier_to_super_call(class_def: ast.ClassDef, identifier: ast.Name) -> None:
    """Pass ``identifier`` as the last positional argument of ``super().__init__``.

    Raises:
        MemberNotFoundError: If the class has no constructor or the
            constructor doesn't call ``super().__init__``.
    """
    constructor = _find_method(class_def, CONSTRUCTOR)
    if constructor is None:
        raise MemberNotFoundError(class_def.name, CONSTRUCTOR)
    call = _find_super_call(constructor)
    if call is None:
        raise MemberNotFoundError(class_def.name, "super().__init__()")
    if any(isinstance(arg, ast.Name) and arg.id == identifier.id for arg in call.args):
        return
    call.args.append(name(identifier.id))


class _ReturnAwaiter(ast.NodeTransformer):
    """Awaits the value of every ``return`` of one function body."""

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.FunctionDef:
        return node

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> ast.AsyncFunctionDef:
        return node

    def visit_ClassDef(self, node: ast.ClassDef) -> ast.ClassDef:
        return node

    def visit_Lambda(self, node: ast.Lambda) -> ast.Lambda:
        return node

    def visit_Return(self, node: ast.Return) -> ast.Return:
        # literals are never awaitable
        if node.value is not None and not isinstance(node.value, (ast.Await, ast.Constant)):
            node.value = ast.Await(value=node.value)
        return node


def _unwrap_awaitable(annotation: ast.expr | None) -> ast.expr | None:
    match annotation:
        case ast.Subscript(value=ast.Name(id=wrapper) | ast.Attribute(attr=wrapper), slice=inner):
            if wrapper not in AWAITABLE_WRAPPERS:
                return annotation
            if isinstance(inner, ast.Tuple):
                return inner.elts[-1]
            return inner
    return annotation


def _to_async(method: ast.FunctionDef) -> ast.AsyncFunctionDef:
    fields = {field: getattr(method, field) for field in method._fields if hasattr(method, field)}
    coroutine = ast.copy_location(ast.AsyncFunctionDef(**fields), method)
    coroutine.returns = _unwrap_awaitable(coroutine.returns)
    awaiter = _ReturnAwaiter()
    for statement in coroutine.body:
        awaiter.visit(statement)
    return coroutine


def mark_methods_async(
    class_def: ast.ClassDef,
    method_names: Iterable[str],
    required: bool = True,
) -> set[str]:
    """Turn the named methods into coroutines.

    Returned awaitables are awaited and ``Awaitable[T]`` return annotations
    become ``T``. Methods that are already coroutines are left alone.

    Args:
        class_def: The class owning the methods.
        method_names: Names of the methods to convert.
        required: Whether a missing method is an error.

    Returns:
        Names of the methods that were converted.

    Raises:
        MemberNotFoundError: If ``required`` and a method is missing.
    """
    converted: set[str] = set()
    for method_name in sorted(method_names):
        method = _find_method(class_def, method_name)
        if method is None:
            if required:
                raise MemberNotFoundError(class_def.name, method_name)
            continue
        if isinstance(method, ast.AsyncFunctionDef):
            continue
        index = class_def.body.index(method)
        class_def.body[index] = _to_async(method)
        converted.add(method_name)

    if converted:
        logger.debug(f"Marked {sorted(converted)} async in {class_def.name}")
    return converted


def apply_injection(
    module: ast.Module,
    decision: InjectionDecision,
    *,
    class_name: str,
    module_path: str,
    thread_to_super: bool = False,
    helper_imports: Sequence[ImportTarget] = (),
    require_async_methods: bool = True,
) -> InjectionState:
    """Apply an injection decision to one module.

    Args:
        module: The interpolated module, still carrying its scaffold.
        decision: The entity's shared injection decision.
        class_name: Name of the class receiving the collaborator.
        module_path: Destination path of ``module``, for relative imports.
        thread_to_super: Whether to pass the collaborator to the
            superclass constructor.
        helper_imports: Extra symbols to import when injecting.
        require_async_methods: Whether every async method must exist.

    Returns:
        The final state, always ``FINALIZED``.

    Raises:
        TargetNotFoundError: If the class is missing.
        MemberNotFoundError: If a required member is missing.
        PathResolutionError: If an import path cannot be computed.
    """
    machine = InjectionStateMachine(module_path)
    class_def = get_class_declaration_by_id(module, class_name)
    machine.transition(InjectionState.SENSITIVE_FIELDS_CHECKED)

    if not decision.injects:
        machine.transition(InjectionState.NO_CHANGE)
    else:
        collaborator = decision.collaborator
        add_injectable_dependency(
            class_def,
            collaborator.member_name,
            name(collaborator.type_name),
            collaborator.visibility,
        )
        if thread_to_super:
            add_identifier_to_super_call(class_def, name(collaborator.member_name))
        mark_methods_async(class_def, decision.async_methods, required=require_async_methods)

        imports = [
            import_names(
                [collaborator.type_name],
                relative_import_path(module_path, collaborator.module_path),
            )
        ]
        imports.extend(
            import_names([target.name], relative_import_path(module_path, target.module_path))
            for target in helper_imports
        )
        add_imports(module, imports)
        machine.transition(InjectionState.COLLABORATOR_INJECTED)

    machine.transition(InjectionState.FINALIZED)
    return machine.state
