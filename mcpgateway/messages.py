"""MCP message shapes used by the gateway: tool calls, tool results and JSON-RPC envelopes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"

_CONTENT_TYPES = frozenset({"text", "image", "audio", "resource", "resource_link"})


@dataclass
class CallToolRequest:
    """A request to call a named tool with arguments."""

    name: str
    arguments: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the request in its JSON form."""
        params: dict[str, Any] = {"name": self.name}
        if self.arguments is not None:
            params["arguments"] = self.arguments
        return {"method": "tools/call", "params": params}


@dataclass
class CallToolResult:
    """The result of a tool call: a list of content items."""

    content: list[dict[str, Any]] = field(default_factory=list)
    is_error: bool = False
    structured_content: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the result in its JSON form."""
        data: dict[str, Any] = {"content": [dict(item) for item in self.content]}
        if self.structured_content is not None:
            data["structuredContent"] = self.structured_content
        if self.is_error:
            data["isError"] = True
        return data

    def text(self) -> str:
        """Concatenate the text of all text content items."""
        return "".join(
            item["text"]
            for item in self.content
            if item.get("type") == "text" and isinstance(item.get("text"), str)
        )


def _load(data: Any) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        return json.loads(data)
    return data


def parse_call_tool_result(data: Any) -> CallToolResult:
    """Build a CallToolResult from JSON text or an already decoded mapping."""
    obj = _load(data)
    if not isinstance(obj, dict):
        raise ValueError("tool result is not an object")
    content = obj.get("content")
    if not isinstance(content, list):
        raise ValueError("content is not an array")
    for item in content:
        if not isinstance(item, dict) or item.get("type") not in _CONTENT_TYPES:
            raise ValueError("unsupported content type")
        if item["type"] == "text" and not isinstance(item.get("text"), str):
            raise ValueError("text content has no text")
    return CallToolResult(
        content=[dict(item) for item in content],
        is_error=obj.get("isError") is True,
        structured_content=obj.get("structuredContent"),
    )


def text_result(text: str) -> CallToolResult:
    """A successful result holding one text item."""
    return CallToolResult(content=[{"type": "text", "text": text}])


def error_result(text: str) -> CallToolResult:
    """An error result holding one text item."""
    return CallToolResult(content=[{"type": "text", "text": text}], is_error=True)


@dataclass
class BaseMessage:
    """The envelope of a JSON-RPC message read from a server."""

    jsonrpc: str = ""
    id: int | None = None
    method: str = ""
    result: Any = None
    has_result: bool = False
    error_code: int | None = None
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error_message is not None


def _typed(obj: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or isinstance(value, bool) and kind is not bool:
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def parse_base_message(line: str | bytes) -> BaseMessage:
    """Decode one JSON-RPC line; raise ValueError if it is not a valid envelope."""
    obj = json.loads(line)
    if not isinstance(obj, dict):
        raise ValueError("message is not an object")

    message = BaseMessage(
        jsonrpc=_typed(obj, "jsonrpc", str, ""),
        id=_typed(obj, "id", int, None),
        method=_typed(obj, "method", str, ""),
    )
    if "result" in obj:
        message.result = obj["result"]
        message.has_result = True

    error = obj.get("error")
    if error is not None:
        if not isinstance(error, dict):
            raise ValueError("field 'error' has the wrong type")
        message.error_code = _typed(error, "code", int, 0)
        message.error_message = _typed(error, "message", str, "")
    return message