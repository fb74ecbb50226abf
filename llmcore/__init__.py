"""
llmcore: a thin, provider-agnostic layer over OpenAI-compatible chat completions.

    from llmcore import Context, UserMessage, get_model, complete, stream

    model = get_model("openai", "gpt-4o-mini")
    ctx = Context(system_prompt="You are helpful.", messages=[UserMessage(content="Hi")])

    reply = await complete(model, ctx)

    s = stream(model, ctx)
    async for event in s:
        if event.type == "text_delta":
            print(event.delta, end="")
    final = await s.result()
"""

from llmcore.providers.base import (
    AuthError,
    MalformedResponseError,
    ProviderError,
    RateLimitError,
    TransportError,
)
from llmcore.providers.openai import AssistantMessageStream, complete, stream
from llmcore.schemas.events import (
    DoneEvent,
    ErrorEvent,
    StartEvent,
    StreamEvent,
    TextDeltaEvent,
    TextEndEvent,
    TextStartEvent,
    ThinkingDeltaEvent,
    ThinkingEndEvent,
    ThinkingStartEvent,
    ToolCallDeltaEvent,
    ToolCallEndEvent,
    ToolCallStartEvent,
)
from llmcore.schemas.messages import (
    AssistantMessage,
    AssistantResponse,
    ContentBlock,
    Context,
    Cost,
    Message,
    Model,
    TextBlock,
    Tool,
    ToolCallBlock,
    ToolResultMessage,
    Usage,
    UserMessage,
    get_model,
    is_tool_call_block,
    string_enum,
)

__all__ = [
    "AssistantMessage",
    "AssistantMessageStream",
    "AssistantResponse",
    "AuthError",
    "ContentBlock",
    "Context",
    "Cost",
    "DoneEvent",
    "ErrorEvent",
    "MalformedResponseError",
    "Message",
    "Model",
    "ProviderError",
    "RateLimitError",
    "StartEvent",
    "StreamEvent",
    "TextBlock",
    "TextDeltaEvent",
    "TextEndEvent",
    "TextStartEvent",
    "ThinkingDeltaEvent",
    "ThinkingEndEvent",
    "ThinkingStartEvent",
    "Tool",
    "ToolCallBlock",
    "ToolCallDeltaEvent",
    "ToolCallEndEvent",
    "ToolCallStartEvent",
    "ToolResultMessage",
    "TransportError",
    "Usage",
    "UserMessage",
    "complete",
    "get_model",
    "is_tool_call_block",
    "stream",
    "string_enum",
]
