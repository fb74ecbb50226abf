# OpenAI-compatible chat-completions provider (OpenAI, DeepSeek, Kimi, vLLM, ...)
# complete(): one POST, one AssistantResponse, errors raised to the caller
# stream(): SSE chunks turned into StreamEvents, errors turned into a final "error" event

import json
import logging
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Iterator, List, Optional

import httpx

from llmcore.core import config
from llmcore.providers.base import (
    MalformedResponseError,
    ProviderError,
    TransportError,
    error_for_status,
)
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
    AssistantResponse,
    ContentBlock,
    Context,
    DoneReason,
    Model,
    TextBlock,
    ToolCallBlock,
    Usage,
)
from llmcore.services.wire import (
    build_payload,
    parse_arguments,
    parse_message,
    parse_stop_reason,
    parse_usage,
)

logger = logging.getLogger(__name__)


def _url() -> str:
    return f"{config.base_url().rstrip('/')}/chat/completions"


def _headers() -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    key = config.api_key()
    if key:
        headers["Authorization"] = f"Bearer {key}"
    return headers


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    # an injected client belongs to the caller and is left open
    if client is not None:
        yield client
        return
    timeout = httpx.Timeout(config.REQUEST_TIMEOUT, connect=config.CONNECT_TIMEOUT)
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


@contextmanager
def _transport_errors() -> Iterator[None]:
    try:
        yield
    except httpx.TransportError as e:
        raise TransportError(f"Provider transport error: {e}") from e
    except httpx.HTTPError as e:
        # redirects, undecodable bodies and the like
        raise ProviderError(f"Provider HTTP error: {e}") from e


def _decode_json(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Provider returned invalid JSON: {text[:200]!r}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object from provider, got: {text[:200]!r}")
    if data.get("error"):
        raise ProviderError(f"Provider error: {data['error']}")
    return data


async def complete(
    model: Model,
    context: Context,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> AssistantResponse:
    """Send the whole context and wait for a single assistant message.

    Raises:
        AuthError, RateLimitError, TransportError, MalformedResponseError,
        ProviderError: nothing is retried or caught here.
    """
    payload = build_payload(model.name, context)
    url = _url()
    logger.debug("POST %s model=%s messages=%d stream=False", url, model.name, len(payload["messages"]))

    with _transport_errors():
        async with _client_scope(client) as c:
            r = await c.post(url, json=payload, headers=_headers())
    if r.is_error:
        raise error_for_status(r.status_code, r.text)

    data = _decode_json(r.text)
    try:
        choice = data["choices"][0]
        message = choice["message"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"Unexpected completion shape: {data!r}") from e
    if not isinstance(choice, dict) or not isinstance(message, dict):
        raise MalformedResponseError(f"Unexpected completion shape: {data!r}")

    response = AssistantResponse(
        content=parse_message(message),
        usage=parse_usage(data.get("usage") or {}),
        stop_reason=parse_stop_reason(choice.get("finish_reason")),
    )
    logger.debug("completion done: blocks=%d reason=%s", len(response.content), response.stop_reason)
    return response


# --------- streaming ---------
async def _iter_chunks(response: httpx.Response) -> AsyncIterator[Dict[str, Any]]:
    """Parse server-sent events; only ``data:`` lines matter and ``[DONE]`` ends the stream."""
    async for line in response.aiter_lines():
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if data == "[DONE]":
            break
        if data:
            yield _decode_json(data)


def _expect_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Expected {what} to be an object, got: {value!r}")
    return value


@dataclass
class _PartialToolCall:
    position: int
    id: str = ""
    name: str = ""
    arguments: List[str] = field(default_factory=list)

    def finish(self) -> ToolCallBlock:
        return ToolCallBlock(id=self.id, name=self.name, arguments=parse_arguments("".join(self.arguments)))


class _StreamState:
    """Accumulates one session's blocks/usage and decides which events each chunk produces."""

    def __init__(self) -> None:
        self.blocks: List[ContentBlock] = []
        self.text: List[str] = []
        self.tool_calls: Dict[int, _PartialToolCall] = {}
        self.usage: Optional[Usage] = None
        self.reason: DoneReason = "stop"
        self.thinking = False

    def feed(self, chunk: Dict[str, Any]) -> Iterator[StreamEvent]:
        if chunk.get("usage"):
            self.usage = parse_usage(chunk["usage"])
        choices = chunk.get("choices") or []
        if not isinstance(choices, list):
            raise MalformedResponseError(f"Expected choices to be a list, got: {choices!r}")
        if not choices:
            return
        choice = _expect_dict(choices[0], "choices[0]")
        if choice.get("finish_reason"):
            self.reason = parse_stop_reason(choice["finish_reason"])
        delta = _expect_dict(choice.get("delta") or {}, "choices[0].delta")

        reasoning = delta.get("reasoning_content")
        if reasoning:
            if not self.thinking:
                self.thinking = True
                yield ThinkingStartEvent()
            yield ThinkingDeltaEvent(delta=reasoning)

        content = delta.get("content")
        fragments = delta.get("tool_calls") or []
        if self.thinking and (content or fragments):
            self.thinking = False
            yield ThinkingEndEvent()
        if content:
            self.text.append(content)
            yield TextDeltaEvent(delta=content)
        for fragment in fragments:
            yield from self._feed_tool_call(_expect_dict(fragment, "tool call fragment"))

    def _feed_tool_call(self, fragment: Dict[str, Any]) -> Iterator[StreamEvent]:
        index = fragment.get("index")
        if index is None:
            index = len(self.tool_calls)
        function = _expect_dict(fragment.get("function") or {}, "tool call function")
        call = self.tool_calls.get(index)
        if call is None:
            # text seen so far takes slot 0; calls follow in arrival order
            position = (1 if self.text else 0) + len(self.tool_calls)
            call = _PartialToolCall(position=position, id=fragment.get("id") or "", name=function.get("name") or "")
            self.tool_calls[index] = call
            yield ToolCallStartEvent(index=index, content_index=position, id=call.id, name=call.name)
        else:
            call.id = call.id or fragment.get("id") or ""
            call.name = call.name or function.get("name") or ""
        if function.get("arguments"):
            call.arguments.append(function["arguments"])
            yield ToolCallDeltaEvent(index=index, content_index=call.position, delta=function["arguments"])

    def _flush_text(self) -> None:
        text = "".join(self.text)
        self.text = []
        if text:
            self.blocks.append(TextBlock(text=text))

    def finish(self) -> Iterator[StreamEvent]:
        """Events after the provider stream is drained; text block first, then tool calls by index."""
        if self.thinking:
            self.thinking = False
            yield ThinkingEndEvent()
        yield TextEndEvent()
        self._flush_text()
        for index in sorted(self.tool_calls):
            block = self.tool_calls[index].finish()
            position = len(self.blocks)
            self.blocks.append(block)
            yield ToolCallEndEvent(index=index, content_index=position, tool_call=block)

    def result(self) -> AssistantResponse:
        return AssistantResponse(content=list(self.blocks), usage=self.usage, stop_reason=self.reason)

    def failed(self, error: BaseException) -> AssistantResponse:
        self._flush_text()
        return AssistantResponse(
            content=list(self.blocks),
            usage=self.usage,
            stop_reason="error",
            error_message=str(error) or type(error).__name__,
        )


class AssistantMessageStream:
    """Lazy, single-pass stream of events for one request.

    Nothing is sent until the first event is requested. ``async for`` drives
    the request; ``result()`` drains whatever is left and returns the final
    message. Iterating a second time yields nothing.
    """

    def __init__(
        self,
        model: Model,
        context: Context,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._model = model
        self._context = context
        self._client = client
        self._state = _StreamState()
        self._final: Optional[AssistantResponse] = None
        self._events = self._run()

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        return self._events

    async def result(self) -> AssistantResponse:
        if self._final is None:
            async for _ in self._events:
                pass
        if self._final is None:
            # aclose() was called before the session finished
            self._final = self._state.failed(ProviderError("Stream closed before completion"))
        return self._final

    async def aclose(self) -> None:
        await self._events.aclose()

    async def _run(self) -> AsyncGenerator[StreamEvent, None]:
        state = self._state
        try:
            yield StartEvent(partial={"model": self._model.name})

            payload = build_payload(self._model.name, self._context, stream=True)
            url = _url()
            logger.debug("POST %s model=%s messages=%d stream=True", url, self._model.name, len(payload["messages"]))

            with _transport_errors():
                async with _client_scope(self._client) as client:
                    async with client.stream("POST", url, json=payload, headers=_headers()) as response:
                        if response.is_error:
                            await response.aread()
                            raise error_for_status(response.status_code, response.text)
                        yield TextStartEvent()
                        async for chunk in _iter_chunks(response):
                            for event in state.feed(chunk):
                                yield event

            for event in state.finish():
                yield event
            self._final = state.result()
            logger.debug("stream done: blocks=%d reason=%s", len(self._final.content), self._final.stop_reason)
            yield DoneEvent(reason=state.reason)
        except Exception as e:
            logger.exception("streaming error occurred: %s", e)
            self._final = state.failed(e)
            yield ErrorEvent(error=e)


def stream(
    model: Model,
    context: Context,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> AssistantMessageStream:
    return AssistantMessageStream(model, context, client=client)
