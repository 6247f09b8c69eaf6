"""Todo list plugin entry point."""

import json
import logging
from typing import List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.registry import Plugin

logger = logging.getLogger("plugin.todo")

todo_declaration = FunctionDeclaration(
    name="manage_todo",
    description="Manages a todo list. Provide a JSON string containing an array of todo objects ({id, text, done}).",
    parameters=ParameterSchema(
        properties={
            "todos": PropertySchema(
                type=SchemaType.STRING,
                description=(
                    "JSON string of an array of todos with properties id, text and done. "
                    "Example: '[{\"id\":\"1\",\"text\":\"Buy groceries\",\"done\":false}]'"
                ),
            ),
        },
        required=["todos"],
    ),
)


class TodoItem(BaseModel):
    id: str
    text: str
    done: bool = False


_todo_list = TypeAdapter(List[TodoItem])


class TodoHandler(PluginHandler):
    """Replaces the todo list with the one sent by the model."""

    def __init__(self):
        self.todos: List[TodoItem] = []

    def clone(self) -> "TodoHandler":
        return TodoHandler()

    def handle(self, call: FunctionCall) -> Optional[str]:
        raw = call.args.get("todos")
        if raw is None:
            raise ValueError("No todos provided")
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
            self.todos = _todo_list.validate_python(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Invalid todo list: {e}") from e

        done = sum(1 for t in self.todos if t.done)
        logger.info(f"Updated todo list: {len(self.todos)} item(s), {done} done")
        return f"{len(self.todos)} todo(s), {done} done"


def register() -> Plugin:
    return Plugin(
        id="todo",
        name="Todo List Plugin",
        declaration=todo_declaration,
        handler=TodoHandler(),
        component="TodoPanel",
        description="Create and manage todo lists",
        version="1.0.0",
        author="Default",
    )
