"""Entity metadata consumed by the synthesis engine.

Entities arrive already validated; the engine only reads them.
"""

import enum
from dataclasses import dataclass, field


class DataType(str, enum.Enum):
    """Field data types understood by the generators."""

    SINGLE_LINE_TEXT = "SingleLineText"
    MULTI_LINE_TEXT = "MultiLineText"
    EMAIL = "Email"
    WHOLE_NUMBER = "WholeNumber"
    DECIMAL_NUMBER = "DecimalNumber"
    DATE_TIME = "DateTime"
    BOOLEAN = "Boolean"
    ID = "Id"
    LOOKUP = "Lookup"
    OPTION_SET = "OptionSet"
    PASSWORD = "Password"


SENSITIVE_DATA_TYPES = frozenset({DataType.PASSWORD})


@dataclass(frozen=True)
class EntityField:
    """A single field of an entity.

    Attributes:
        name: The field name as it appears in the persistence layer.
        data_type: Capability tag of the field.
    """

    name: str
    data_type: DataType = DataType.SINGLE_LINE_TEXT

    @property
    def is_sensitive(self) -> bool:
        """Whether the value must be one-way transformed before storage."""
        return self.data_type in SENSITIVE_DATA_TYPES


@dataclass(frozen=True)
class Entity:
    """An entity to generate services for.

    Attributes:
        name: Entity name, used for module paths and the client delegate.
        type_name: Entity type name, used for class and argument type names.
        fields: Ordered fields of the entity.
    """

    name: str
    type_name: str
    fields: tuple[EntityField, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Module:
    """A generated source file.

    Attributes:
        path: Destination path of the file.
        code: Rendered source text.
    """

    path: str
    code: str
