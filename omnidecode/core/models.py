"""Data model for decoded model output.

This module provides the pydantic models produced by a decode call: the
normalized ``ToolInvocation`` records, the ``Point`` coordinate pair used by
pointer actions, non-fatal ``Diagnostic`` entries, and the ``ParsedContent``
container that ties them together.
"""

import json
from typing import Any, Dict, List, NamedTuple

from pydantic import BaseModel, Field, field_serializer


class Point(dict):
    """A normalized screen coordinate pair.

    Stored as a plain ``{"x": ..., "y": ...}`` mapping so invocation arguments
    stay JSON-compatible, with attribute access for convenience.

    Example:
        >>> point = Point(x=100, y=200)
        >>> point == {"x": 100, "y": 200}
        True
        >>> point.x
        100
    """

    def __init__(self, x: int, y: int) -> None:
        super().__init__(x=int(x), y=int(y))

    @property
    def x(self) -> int:
        """Horizontal coordinate."""
        return self["x"]

    @property
    def y(self) -> int:
        """Vertical coordinate."""
        return self["y"]

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


class RawCall(NamedTuple):
    """A decoded call before an identifier has been assigned."""

    name: str
    arguments: Dict[str, Any]


class ToolInvocation(BaseModel):
    """A single normalized tool invocation decoded from model output.

    The ``name`` is the raw symbol taken from the text and is not checked
    against any registry. ``arguments`` keeps the order in which keys were
    first seen in the source text.

    Attributes:
        id: Identifier unique to this invocation.
        name: Tool name as written by the model.
        arguments: Mapping of argument names to JSON-compatible values or points.
    """

    id: str = Field(description="Identifier unique to this invocation")
    name: str = Field(description="Tool name as written by the model")
    arguments: Dict[str, Any] = Field(
        default_factory=dict,
        description="Argument mapping in source order"
    )

    @field_serializer("arguments")
    def serialize_arguments(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return {key: dict(value) if isinstance(value, Point) else value for key, value in arguments.items()}

    def arguments_json(self) -> str:
        """Serialize the arguments to a JSON string.

        Points are rendered as ``{"x": ..., "y": ...}`` objects.

        Returns:
            JSON encoded arguments.
        """
        return json.dumps(self.arguments, ensure_ascii=False)

    def to_chat_completion(self) -> Dict[str, Any]:
        """Render the invocation in chat-completion tool call shape.

        Returns:
            Dictionary with ``id``, ``type`` and ``function`` keys, where the
            function arguments are a JSON string.

        Example:
            >>> call = ToolInvocation(id="call_1", name="run", arguments={"cmd": "ls"})
            >>> call.to_chat_completion()["function"]
            {'name': 'run', 'arguments': '{"cmd": "ls"}'}
        """
        return {
            "id": self.id,
            "type": "function",
            "function": {
                "name": self.name,
                "arguments": self.arguments_json(),
            },
        }


class Diagnostic(BaseModel):
    """A non-fatal note about model output that could not be fully decoded.

    Attributes:
        environment: Environment whose decoder produced the note.
        kind: Short machine readable category.
        message: Human readable description.
        detail: Extra context such as the offending fragment.
    """

    environment: str = Field(description="Environment whose decoder produced the note")
    kind: str = Field(description="Machine readable category")
    message: str = Field(description="Human readable description")
    detail: Dict[str, Any] = Field(default_factory=dict, description="Extra context")


class ParsedContent(BaseModel):
    """Structured instruction decoded from one block of model output.

    Reasoning and answer are independently optional and default to the empty
    string. ``actions`` is empty when no decodable action block was found.

    Attributes:
        reasoning: Content of the reasoning block.
        answer: Content of the answer block.
        actions: Tool invocations in source order.
        diagnostics: Non-fatal notes about dropped or malformed output.
    """

    reasoning: str = Field(default="", description="Content of the reasoning block")
    answer: str = Field(default="", description="Content of the answer block")
    actions: List[ToolInvocation] = Field(
        default_factory=list,
        description="Tool invocations in source order"
    )
    diagnostics: List[Diagnostic] = Field(
        default_factory=list,
        description="Non-fatal notes about dropped or malformed output"
    )

    @property
    def has_actions(self) -> bool:
        """Whether at least one invocation was decoded."""
        return bool(self.actions)

    def to_chat_completion_tool_calls(self) -> List[Dict[str, Any]]:
        """Render all actions in chat-completion tool call shape.

        Returns:
            List of tool call dictionaries, empty when there are no actions.
        """
        return [action.to_chat_completion() for action in self.actions]
