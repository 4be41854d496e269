"""An MCP client that talks JSON-RPC over the standard streams of a child process."""

from __future__ import annotations

import concurrent.futures
import itertools
import json
import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Mapping
from typing import IO, Any

from .messages import (
    JSONRPC_VERSION,
    BaseMessage,
    CallToolRequest,
    CallToolResult,
    parse_base_message,
    parse_call_tool_result,
)
from .prefixer import Prefixer


class ClientError(RuntimeError):
    """Raised when the server fails, exits, or answers with an error."""


class StdioClient:
    """Starts a command and exchanges MCP requests with it line by line."""

    def __init__(
        self,
        name: str,
        command: str,
        args: Iterable[str] = (),
        env: Iterable[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.name = name
        self.command = command
        self.args = list(args)
        self.env = None if env is None else list(env)
        self.timeout = timeout

        self._process: subprocess.Popen[bytes] | None = None
        self._ids = itertools.count(1)
        self._pending: dict[int, concurrent.futures.Future[BaseMessage]] = {}
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._stderr: list[str] = []
        self._exited = threading.Event()
        self._initialized = False

    def __enter__(self) -> StdioClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _environment(self) -> dict[str, str] | None:
        if self.env is None:
            return None
        environment = {}
        for entry in self.env:
            key, _, value = entry.partition("=")
            environment[key] = value
        return environment

    def initialize(
        self,
        protocol_version: str,
        client_info: Mapping[str, Any],
        debug: bool = False,
    ) -> dict[str, Any]:
        """Start the server and perform the MCP initialize handshake."""
        if self._initialized:
            raise ClientError("client already initialized")

        try:
            process = subprocess.Popen(
                [self.command, *self.args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._environment(),
            )
        except OSError as exc:
            raise ClientError(f"failed to start command: {exc}") from exc
        self._process = process

        sink = Prefixer(sys.stderr, f"- {self.name}: ") if debug else None
        readers = [
            threading.Thread(target=self._read_responses, args=(process.stdout,), daemon=True),
            threading.Thread(target=self._read_stderr, args=(process.stderr, sink), daemon=True),
        ]
        for reader in readers:
            reader.start()
        threading.Thread(target=self._watch, args=(process, readers), daemon=True).start()

        params = {
            "protocolVersion": protocol_version,
            "clientInfo": dict(client_info),
            "capabilities": {},
        }
        try:
            result = self._request("initialize", params)
        except TimeoutError:
            self.close()
            raise

        try:
            self._send({"jsonrpc": JSONRPC_VERSION, "method": "notifications/initialized"})
        except OSError as exc:
            raise ClientError(f"failed to send initialized notification: {exc}") from exc

        self._initialized = True
        return result

    def _read_responses(self, stream: IO[bytes]) -> None:
        for raw in stream:
            try:
                message = parse_base_message(raw)
            except ValueError:
                continue
            if message.id is None:
                continue
            with self._lock:
                future = self._pending.pop(message.id, None)
            if future is not None:
                future.set_result(message)

    def _read_stderr(self, stream: IO[bytes], sink: Prefixer | None) -> None:
        for raw in stream:
            text = raw.decode("utf-8", errors="replace")
            self._stderr.append(text)
            if sink is not None:
                sink.write(text)

    def _watch(self, process: subprocess.Popen[bytes], readers: list[threading.Thread]) -> None:
        process.wait()
        for reader in readers:
            reader.join(timeout=1)
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()
        with self._lock:
            self._exited.set()
            pending = list(self._pending.values())
            self._pending.clear()
        message = self._exit_message()
        for future in pending:
            future.set_exception(ClientError(message))

    def _exit_message(self) -> str:
        text = "".join(self._stderr)
        if text:
            return text
        code = self._process.returncode if self._process is not None else None
        return f"{self.name}: process exited with code {code}"

    def _send(self, message: Mapping[str, Any]) -> None:
        process = self._process
        if process is None or process.stdin is None:
            raise ClientError("client not started")
        line = (json.dumps(message) + "\n").encode("utf-8")
        with self._write_lock:
            process.stdin.write(line)
            process.stdin.flush()

    def _request(self, method: str, params: Any) -> Any:
        if self._process is None:
            raise ClientError("client not initialized")

        future: concurrent.futures.Future[BaseMessage] = concurrent.futures.Future()
        with self._lock:
            if self._exited.is_set():
                raise ClientError(self._exit_message())
            request_id = next(self._ids)
            self._pending[request_id] = future

        request = {"jsonrpc": JSONRPC_VERSION, "id": request_id, "method": method}
        if params is not None:
            request["params"] = params
        try:
            self._send(request)
        except (OSError, ValueError) as exc:
            with self._lock:
                self._pending.pop(request_id, None)
            if future.done() and future.exception() is not None:
                raise future.exception() from None
            raise ClientError(f"failed to encode request: {exc}") from exc

        try:
            message = future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            with self._lock:
                self._pending.pop(request_id, None)
            raise TimeoutError(f"{method}: no response within {self.timeout}s") from None

        if message.is_error:
            raise ClientError(message.error_message)
        if not message.has_result:
            raise ClientError(f"{method}: response has no result")
        return message.result

    def list_tools(self) -> dict[str, Any]:
        """Return the server's tools/list result."""
        return self._request("tools/list", {})

    def list_prompts(self) -> dict[str, Any]:
        """Return the server's prompts/list result."""
        return self._request("prompts/list", {})

    def list_resources(self) -> dict[str, Any]:
        """Return the server's resources/list result."""
        return self._request("resources/list", {})

    def list_resource_templates(self) -> dict[str, Any]:
        """Return the server's resources/templates/list result."""
        return self._request("resources/templates/list", {})

    def call_tool(self, name: str, arguments: Any = None) -> CallToolResult:
        """Call a tool and parse its result."""
        params = CallToolRequest(name, arguments).to_dict()["params"]
        return parse_call_tool_result(self._request("tools/call", params))

    def get_prompt(self, name: str, arguments: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Fetch a prompt by name."""
        params: dict[str, Any] = {"name": name}
        if arguments is not None:
            params["arguments"] = dict(arguments)
        return self._request("prompts/get", params)

    def read_resource(self, uri: str) -> dict[str, Any]:
        """Read a resource by URI."""
        return self._request("resources/read", {"uri": uri})

    def close(self) -> None:
        """Stop the server process."""
        process = self._process
        if process is None:
            return
        if process.poll() is None:
            if os.name == "nt":
                process.kill()
            else:
                process.terminate()
        if process.stdin is not None:
            try:
                process.stdin.close()
            except OSError:
                pass
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()