"""
Events emitted by stream(), one class per ``type`` tag.

A successful session reads::

    start, text_start, (text_delta | thinking_* | toolcall_start | toolcall_delta)*,
    text_end, toolcall_end*, done

A failure replaces the rest of that sequence with a single ``error`` event.
"""

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import ConfigDict, Field

from llmcore.schemas.messages import DoneReason, Record, ToolCallBlock


class StartEvent(Record):
    type: Literal["start"] = "start"
    partial: Dict[str, Any] = Field(default_factory=dict)


class TextStartEvent(Record):
    type: Literal["text_start"] = "text_start"


class TextDeltaEvent(Record):
    type: Literal["text_delta"] = "text_delta"
    delta: str


class TextEndEvent(Record):
    type: Literal["text_end"] = "text_end"


class ThinkingStartEvent(Record):
    type: Literal["thinking_start"] = "thinking_start"


class ThinkingDeltaEvent(Record):
    type: Literal["thinking_delta"] = "thinking_delta"
    delta: str


class ThinkingEndEvent(Record):
    type: Literal["thinking_end"] = "thinking_end"


# index is the provider's tool-call index and ties start/delta/end of one call together.
# content_index is the block's position in the final message content; on start/delta it
# assumes no text arrives after the call, toolcall_end always carries the real position.
# id/name on start are "" when the provider sends them in a later fragment; toolcall_end has the merged values.
class ToolCallStartEvent(Record):
    type: Literal["toolcall_start"] = "toolcall_start"
    index: int
    content_index: int
    id: str = ""
    name: str = ""


class ToolCallDeltaEvent(Record):
    type: Literal["toolcall_delta"] = "toolcall_delta"
    index: int
    content_index: int
    delta: str


class ToolCallEndEvent(Record):
    type: Literal["toolcall_end"] = "toolcall_end"
    index: int
    content_index: int
    tool_call: ToolCallBlock


class DoneEvent(Record):
    type: Literal["done"] = "done"
    reason: DoneReason = "stop"


class ErrorEvent(Record):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["error"] = "error"
    error: Exception


StreamEvent = Annotated[
    Union[
        StartEvent,
        TextStartEvent,
        TextDeltaEvent,
        TextEndEvent,
        ThinkingStartEvent,
        ThinkingDeltaEvent,
        ThinkingEndEvent,
        ToolCallStartEvent,
        ToolCallDeltaEvent,
        ToolCallEndEvent,
        DoneEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]
