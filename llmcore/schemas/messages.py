"""
Provider-agnostic data model for a conversation and its results.

Every record is a frozen pydantic model. Python attributes are snake_case and
``model_dump(by_alias=True)`` gives the camelCase wire names
(``systemPrompt``, ``toolCallId``, ``isError`` ...).

ContentBlock and Message are closed unions discriminated on ``type`` and
``role``, so an unknown tag fails validation instead of being ignored.
"""

import time
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Model(Record):
    # opaque selector; bad provider/name pairs only surface as provider errors
    provider: str
    name: str


def get_model(provider: str, name: str) -> Model:
    return Model(provider=provider, name=name)


class Tool(Record):
    """A function the model may call. ``parameters`` is a JSON schema passed through untouched."""

    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_model(cls, name: str, description: str, params_model: Type[BaseModel]) -> "Tool":
        return cls(name=name, description=description, parameters=params_model.model_json_schema())


def string_enum(values: List[str]) -> Dict[str, Any]:
    """JSON schema for a string restricted to ``values``, for use inside tool parameters."""
    return {"type": "string", "enum": list(values)}


# --------- content blocks ---------
class TextBlock(Record):
    type: Literal["text"] = "text"
    text: str


class ToolCallBlock(Record):
    type: Literal["toolCall"] = "toolCall"
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


ContentBlock = Annotated[Union[TextBlock, ToolCallBlock], Field(discriminator="type")]


def is_tool_call_block(block: ContentBlock) -> bool:
    return isinstance(block, ToolCallBlock)


# --------- messages ---------
class UserMessage(Record):
    role: Literal["user"] = "user"
    content: str


class AssistantMessage(Record):
    role: Literal["assistant"] = "assistant"
    content: List[ContentBlock] = Field(default_factory=list)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ToolResultMessage(Record):
    role: Literal["toolResult"] = "toolResult"
    tool_call_id: str
    tool_name: str
    content: List[ContentBlock] = Field(default_factory=list)
    is_error: bool = False
    timestamp: int = Field(default_factory=_now_ms)


Message = Annotated[
    Union[UserMessage, AssistantMessage, ToolResultMessage],
    Field(discriminator="role"),
]


class Context(Record):
    """Full conversation history sent on every call. Never mutated here; callers own it."""

    system_prompt: str
    messages: List[Message] = Field(default_factory=list)
    tools: Optional[List[Tool]] = None


# --------- results ---------
class Cost(Record):
    # provider total_tokens passed through; not a priced amount
    total: Optional[int] = None


class Usage(Record):
    input: Optional[int] = None
    output: Optional[int] = None
    cost: Cost = Field(default_factory=Cost)
    cached: Optional[int] = None


DoneReason = Literal["stop", "length", "tool_calls"]
StopReason = Literal["stop", "length", "tool_calls", "error"]


class AssistantResponse(AssistantMessage):
    """An assistant message as returned by complete() / stream().result()."""

    usage: Optional[Usage] = None
    stop_reason: StopReason = "stop"
    error_message: Optional[str] = None
