"""Pydantic models for tool calls and API requests."""

from .tool_calls import FunctionCall, FunctionResponse, ToolCall, ToolResponsePayload

__all__ = ["FunctionCall", "FunctionResponse", "ToolCall", "ToolResponsePayload"]
