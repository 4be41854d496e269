# mcpgateway

A library of pieces for building an MCP (Model Context Protocol) gateway: a process that
sits between MCP clients and MCP servers running in containers. It has no dependencies
outside the standard library.

## What is in it

- **`mcpgateway.stdio_client`**: `StdioClient` starts a server command and exchanges
  newline-delimited JSON-RPC with it over stdin and stdout. `initialize(protocol_version,
  client_info, debug=False)` starts the process and performs the handshake; then
  `list_tools`, `list_prompts`, `list_resources`, `list_resource_templates`,
  `call_tool(name, arguments)`, `get_prompt(name, arguments)` and `read_resource(uri)`
  send requests. `close()` stops the process; the client is also a context manager.
  Server errors, early exits and a second `initialize` raise `ClientError`; a request
  that gets no answer within `timeout` seconds raises `TimeoutError`. With `debug=True`
  the server's stderr is copied to ours, each line prefixed with `- <name>: `.
- **`mcpgateway.messages`**: `CallToolRequest`, `CallToolResult` (with `to_dict()` and
  `text()`), `BaseMessage`, `parse_call_tool_result`, `parse_base_message`, and the
  shortcuts `text_result(text)` and `error_result(text)`.
- **`mcpgateway.runtime`**: `base_args(name, cpus, memory, in_dind)` gives the
  `docker run` arguments shared by every MCP container; `mount_args(mounts, read_only)`
  gives `-v` arguments, adding `:ro` when asked; `expand_env` and `expand_env_list`
  substitute `$name` and `${name}` from `KEY=value` strings or a mapping;
  `is_tool_enabled` decides whether a server's tool is exposed; `capabilities_summary`
  formats capability counts such as ` (3 tools) (1 prompts)`.
- **`mcpgateway.configuration`**: `read_secrets_file(path)` reads `.env`-style
  `KEY=value` files (raising `SecretsFileError` on unreadable files or bad lines),
  `merge_by_server` merges per-server settings from several sources with a warning on
  overlaps, and `collect_secret_names` lists the secrets that chosen servers need.
- **`mcpgateway.gateway_util`**: `HealthState` (`is_healthy()`, `set_healthy()`),
  `image_base_name` / `image_base_names` to strip `@sha256:` digests,
  `verifiable_images` to keep images under `mcp/`, and `parse_server_names` to split a
  comma-separated list.
- **`mcpgateway.prefixer`**: `Prefixer(writer, prefix)` writes text to another stream
  with the prefix at the start of each line.
- **`mcpgateway.table`**: `pretty_print_table(rows, max_widths, out)` prints rows sorted
  by their first column (ignoring case) in aligned columns; `truncate_string(s, width)`
  cuts text to a width, ending with `…`.
- **`mcpgateway.secret_args`**: `parse_arg(arg, provider)` turns `key=value` (or a bare
  key for an indirect provider) into a `Secret`; `is_direct_value_provider` and
  `is_valid_provider` check provider names.

## Installation

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## Example

```python
from mcpgateway.gateway_util import parse_server_names
from mcpgateway.runtime import base_args, expand_env, is_tool_enabled
from mcpgateway.secret_args import parse_arg
from mcpgateway.table import truncate_string

assert parse_server_names(" github, ,fetch ") == ["github", "fetch"]
assert is_tool_enabled({}, "github", "", "search", ["github:*"])
assert expand_env("$HOME/data", ["HOME=/root"]) == "/root/data"
assert base_args("github", in_dind=False)[:3] == ["run", "--rm", "-i"]
assert parse_arg("my_key=placeholder").value == "placeholder"
assert truncate_string("abcdef", 4) == "abc…"
```

Talking to an MCP server over stdio:

```python
from mcpgateway.stdio_client import StdioClient

with StdioClient("fetch", "docker", ["run", "-i", "--rm", "mcp/fetch"], timeout=30) as client:
    client.initialize("2025-03-26", {"name": "docker", "version": "1.0.0"})
    tools = client.list_tools()
    result = client.call_tool("fetch", {"url": "https://example.com"})
    print(result.text())
```

## What it does not do

The package provides building blocks only. It has no command-line tool and does not
serve MCP over stdio, SSE or HTTP itself. It does not talk to the Docker daemon: it
builds `docker run` arguments but does not pull images, verify signatures, create
networks or start proxy containers. It does not scan tool calls for secrets or run
tool-call interceptors, and it has no remote (SSE or HTTP) MCP client.

## Running the tests

```
pytest
```