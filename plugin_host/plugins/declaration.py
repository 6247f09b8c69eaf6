"""Capability declaration model - the function schema exposed to the AI model."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SchemaType(str, Enum):
    """Parameter types understood by the live model API."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class PropertySchema(BaseModel):
    """A single named parameter of a capability."""

    type: SchemaType = Field(..., description="Parameter type")
    description: str = Field(default="", description="What the model should pass")
    enum: Optional[List[str]] = Field(default=None, description="Allowed values, if restricted")


class ParameterSchema(BaseModel):
    """Object schema describing a capability's arguments."""

    type: SchemaType = Field(default=SchemaType.OBJECT)
    properties: Dict[str, PropertySchema] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class FunctionDeclaration(BaseModel):
    """Machine-readable description of an invocable capability."""

    name: str = Field(..., min_length=1, description="Public capability identifier (need not be unique)")
    description: str = Field(default="", description="Capability description shown to the model")
    parameters: ParameterSchema = Field(default_factory=ParameterSchema)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON shape sent in the model's tool configuration."""
        data = self.model_dump(mode="json", exclude_none=True)
        if not data["parameters"]["required"]:
            del data["parameters"]["required"]
        return data
