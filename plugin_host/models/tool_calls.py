"""Tool-call messages exchanged with the live model."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class FunctionCall(BaseModel):
    """One capability invocation requested by the model."""

    name: str = Field(..., min_length=1, description="Capability name from the declaration")
    args: Dict[str, Any] = Field(default_factory=dict, description="Named argument values")
    id: str = Field(..., min_length=1, description="Invocation id, echoed in the acknowledgement")


class ToolCall(BaseModel):
    """A model message carrying one or more function calls."""

    model_config = ConfigDict(populate_by_name=True)

    function_calls: List[FunctionCall] = Field(default_factory=list, alias="functionCalls")


class ToolResponsePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    output: Any = Field(default_factory=lambda: {"success": True})
    exclude_from_readback: bool = Field(default=True, alias="excludeFromReadback")


class FunctionResponse(BaseModel):
    """Acknowledgement for a single function call."""

    id: str
    response: ToolResponsePayload = Field(default_factory=ToolResponsePayload)

    @classmethod
    def success(cls, call_id: str) -> "FunctionResponse":
        return cls(id=call_id, response=ToolResponsePayload(output={"success": True}, exclude_from_readback=True))

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
