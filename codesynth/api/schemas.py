"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from pydantic import BaseModel, Field, field_validator

from codesynth.interfaces.entity import DataType, Entity, EntityField, Module
from codesynth.strategies.codegen.naming import is_valid_identifier


# =============================================================================
# Entity Schemas
# =============================================================================


class EntityFieldSchema(BaseModel):
    """A field of the entity to synthesize."""

    name: str = Field(min_length=1, description="Field name")
    data_type: DataType = Field(
        default=DataType.SINGLE_LINE_TEXT,
        description="Field data type; Password fields are hashed before storage",
    )

    def to_field(self) -> EntityField:
        return EntityField(name=self.name, data_type=self.data_type)


class EntitySchema(BaseModel):
    """An entity to synthesize service modules for."""

    name: str = Field(min_length=1, description="Entity name, used for module paths")
    type_name: str = Field(min_length=1, description="Entity type name, used for class names")
    fields: list[EntityFieldSchema] = Field(default_factory=list)

    @field_validator("name", "type_name")
    @classmethod
    def python_identifier(cls, v: str) -> str:
        """Reject names that can't be used as Python identifiers."""
        if not is_valid_identifier(v):
            raise ValueError(f"'{v}' is not a valid Python identifier")
        return v

    @field_validator("fields")
    @classmethod
    def unique_field_names(cls, v: list[EntityFieldSchema]) -> list[EntityFieldSchema]:
        """Reject duplicated field names."""
        names = [field.name for field in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicated field names: {', '.join(duplicates)}")
        return v

    def to_entity(self) -> Entity:
        return Entity(
            name=self.name,
            type_name=self.type_name,
            fields=tuple(field.to_field() for field in self.fields),
        )


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    error_code: str | None = None


# =============================================================================
# Synthesis Schemas
# =============================================================================


class ModuleResponse(BaseModel):
    """A generated module."""

    path: str = Field(description="Destination path of the module")
    code: str = Field(description="Rendered source text")

    @classmethod
    def from_module(cls, module: Module) -> "ModuleResponse":
        return cls(path=module.path, code=module.code)


class SynthesizeRequest(BaseModel):
    """Request for synthesizing the modules of one entity."""

    entity: EntitySchema


class SynthesizeResponse(BaseModel):
    """Response with the modules generated for one entity."""

    entity_name: str
    modules: list[ModuleResponse]


class BatchSynthesizeRequest(BaseModel):
    """Request for synthesizing the modules of several entities."""

    entities: list[EntitySchema] = Field(min_length=1)


class EntitySynthesisResult(BaseModel):
    """Outcome of one entity within a batch."""

    entity_name: str
    modules: list[ModuleResponse] = Field(default_factory=list)
    error: ErrorResponse | None = None


class BatchSynthesizeResponse(BaseModel):
    """Response for a batch synthesis."""

    results: list[EntitySynthesisResult]
    succeeded: int
    failed: int

