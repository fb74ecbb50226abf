"""
Translation between the llmcore data model and the OpenAI-compatible
chat-completions wire format, in both directions:

* Context -> request payload (history, system prompt, tool schemas)
* response / chunk fragments -> content blocks, usage and stop reason
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from llmcore.providers.base import MalformedResponseError
from llmcore.schemas.messages import (
    AssistantMessage,
    ContentBlock,
    Context,
    Cost,
    DoneReason,
    Message,
    TextBlock,
    Tool,
    ToolCallBlock,
    ToolResultMessage,
    Usage,
    UserMessage,
)


def _join_text(blocks: Iterable[ContentBlock]) -> str:
    return "\n".join(b.text for b in blocks if isinstance(b, TextBlock))


def _render_tool_call(block: ToolCallBlock) -> Dict[str, Any]:
    return {
        "id": block.id,
        "type": "function",
        "function": {"name": block.name, "arguments": json.dumps(block.arguments)},
    }


def _render_message(message: Message) -> Dict[str, Any]:
    if isinstance(message, UserMessage):
        return {"role": "user", "content": message.content}
    if isinstance(message, AssistantMessage):
        calls = [_render_tool_call(b) for b in message.content if isinstance(b, ToolCallBlock)]
        text = _join_text(message.content)
        rendered: Dict[str, Any] = {"role": "assistant", "content": text}
        if calls:
            # the API wants null rather than "" next to tool_calls
            rendered["content"] = text or None
            rendered["tool_calls"] = calls
        return rendered
    if isinstance(message, ToolResultMessage):
        return {
            "role": "tool",
            "tool_call_id": message.tool_call_id,
            "content": _join_text(message.content),
        }
    raise TypeError(f"Unsupported message type: {type(message).__name__}")


def build_messages(context: Context) -> List[Dict[str, Any]]:
    """System prompt first, then the history in order."""
    messages: List[Dict[str, Any]] = [{"role": "system", "content": context.system_prompt}]
    messages.extend(_render_message(m) for m in context.messages)
    return messages


def build_tools(tools: Optional[List[Tool]]) -> Optional[List[Dict[str, Any]]]:
    if not tools:
        return None
    return [
        {
            "type": "function",
            "function": {
                "name": t.name,
                "description": t.description,
                "parameters": t.parameters,
            },
        }
        for t in tools
    ]


def build_payload(model_name: str, context: Context, *, stream: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": model_name,
        "messages": build_messages(context),
    }
    tools = build_tools(context.tools)
    if tools is not None:
        payload["tools"] = tools
    if stream:
        payload["stream"] = True
        payload["stream_options"] = {"include_usage": True}
    return payload


def parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    """Decode a tool call's JSON-encoded arguments; empty means no arguments."""
    if raw is None or not raw.strip():
        return {}
    try:
        args = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Invalid tool call arguments: {raw!r}") from e
    if not isinstance(args, dict):
        raise MalformedResponseError(f"Tool call arguments must be a JSON object, got: {raw!r}")
    return args


def parse_usage(raw: Dict[str, Any]) -> Usage:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"Expected usage to be an object, got: {raw!r}")
    cached = raw.get("cached_tokens")
    if cached is None:
        # OpenAI nests it, Moonshot/Kimi put it at the top level
        cached = (raw.get("prompt_tokens_details") or {}).get("cached_tokens")
    return Usage(
        input=raw.get("prompt_tokens"),
        output=raw.get("completion_tokens"),
        cost=Cost(total=raw.get("total_tokens")),
        cached=cached,
    )


def parse_stop_reason(finish_reason: Optional[str]) -> DoneReason:
    if finish_reason == "length":
        return "length"
    if finish_reason in ("tool_calls", "function_call"):
        return "tool_calls"
    return "stop"


def parse_message(message: Dict[str, Any]) -> List[ContentBlock]:
    """Content blocks for one non-streamed ``choices[i].message``: text first, then tool calls."""
    if not isinstance(message, dict):
        raise MalformedResponseError(f"Expected message to be an object, got: {message!r}")
    blocks: List[ContentBlock] = []
    if message.get("content"):
        blocks.append(TextBlock(text=message["content"]))
    for call in message.get("tool_calls") or []:
        function = (call.get("function") or {}) if isinstance(call, dict) else None
        if not isinstance(function, dict):
            raise MalformedResponseError(f"Malformed tool call: {call!r}")
        blocks.append(
            ToolCallBlock(
                id=call.get("id") or "",
                name=function.get("name") or "",
                arguments=parse_arguments(function.get("arguments")),
            )
        )
    return blocks
