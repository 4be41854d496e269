"""Helpers for running MCP server containers: argument building, env expansion, tool filtering."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Sequence, Sized

_SPECIAL_VARS = frozenset("*#$@!?-0123456789")


def _is_alnum(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def _shell_name(s: str) -> tuple[str, int]:
    """Return the variable name at the start of s and how many characters it spans."""
    if s[0] == "{":
        if len(s) > 2 and s[1] in _SPECIAL_VARS and s[2] == "}":
            return s[1], 3
        end = s.find("}", 1)
        if end == 1:
            return "", 2  # bad syntax: "${}"
        if end > 1:
            return s[1:end], end + 1
        return "", 1  # bad syntax: unterminated "${"
    if s[0] in _SPECIAL_VARS:
        return s[0], 1
    width = 0
    while width < len(s) and _is_alnum(s[width]):
        width += 1
    return s[:width], width


def _lookup(name: str, env: Iterable[str] | Mapping[str, str]) -> str:
    if isinstance(env, Mapping):
        return env.get(name, "")
    prefix = name + "="
    for entry in env:
        if entry.startswith(prefix):
            return entry[len(prefix):]
    return ""


def expand_env(value: str, env: Iterable[str] | Mapping[str, str]) -> str:
    """Replace ``$name`` and ``${name}`` in value using env.

    env is either ``KEY=value`` strings, where the first matching entry wins,
    or a mapping. Unknown variables expand to the empty string.
    """
    if not isinstance(env, Mapping):
        env = list(env)
    pieces: list[str] = []
    start = 0
    j = 0
    while j < len(value):
        if value[j] == "$" and j + 1 < len(value):
            pieces.append(value[start:j])
            name, width = _shell_name(value[j + 1:])
            if not name and width > 0:
                pass  # invalid syntax: the characters are dropped
            elif not name:
                pieces.append("$")
            else:
                pieces.append(_lookup(name, env))
            j += width
            start = j + 1
        j += 1
    pieces.append(value[start:])
    return "".join(pieces)


def expand_env_list(
    values: Iterable[str], env: Iterable[str] | Mapping[str, str]
) -> list[str]:
    """Expand every value with expand_env."""
    if not isinstance(env, Mapping):
        env = list(env)
    return [expand_env(value, env) for value in values]


def base_args(
    name: str, cpus: int = 0, memory: str = "", in_dind: bool | None = None
) -> list[str]:
    """Return the ``docker run`` arguments shared by every MCP container.

    When in_dind is None it is taken from the DOCKER_MCP_IN_DIND environment variable.
    """
    if in_dind is None:
        in_dind = os.environ.get("DOCKER_MCP_IN_DIND") == "1"

    args = ["run", "--rm", "-i", "--init", "--security-opt", "no-new-privileges"]
    if cpus > 0:
        args += ["--cpus", str(cpus)]
    if memory:
        args += ["--memory", memory]
    args += ["--pull", "never"]
    if in_dind:
        args.append("--privileged")
    args += [
        "-l", "docker-mcp=true",
        "-l", "docker-mcp-tool-type=mcp",
        "-l", "docker-mcp-name=" + name,
        "-l", "docker-mcp-transport=stdio",
    ]
    return args


def mount_args(mounts: Iterable[str], read_only: bool | None = None) -> list[str]:
    """Return ``-v`` arguments for the non-empty mounts, read-only when asked."""
    args: list[str] = []
    for mount in mounts:
        if not mount:
            continue
        if read_only and not mount.endswith(":ro"):
            mount += ":ro"
        args += ["-v", mount]
    return args


def is_tool_enabled(
    server_tools: Mapping[str, Sequence[str]],
    server_name: str,
    server_image: str,
    tool_name: str,
    enabled_tools: Sequence[str],
) -> bool:
    """Decide whether a server's tool is exposed.

    Without enabled_tools, a server listed in server_tools exposes only the tools
    listed there and any other server exposes all its tools. Otherwise a tool is
    enabled by ``*``, its name, ``server:tool``, ``server:*``, ``image:tool`` or
    ``image:*``, compared without regard to case.
    """
    if not enabled_tools:
        if server_name not in server_tools:
            return True
        return tool_name in server_tools[server_name]

    candidates = {tool_name, f"{server_name}:{tool_name}", f"{server_name}:*"}
    if server_image:
        candidates |= {f"{server_image}:{tool_name}", f"{server_image}:*"}
    wanted = {candidate.casefold() for candidate in candidates}
    return any(
        enabled == "*" or enabled.casefold() in wanted for enabled in enabled_tools
    )


def _count(items: int | Sized) -> int:
    return items if isinstance(items, int) else len(items)


def capabilities_summary(
    tools: int | Sized,
    prompts: int | Sized,
    resources: int | Sized,
    resource_templates: int | Sized,
) -> str:
    """Describe the non-zero capability counts, e.g. `` (3 tools) (1 prompts)``."""
    parts = [
        (tools, "tools"),
        (prompts, "prompts"),
        (resources, "resources"),
        (resource_templates, "resourceTemplates"),
    ]
    return "".join(
        f" ({_count(items)} {label})" for items, label in parts if _count(items) > 0
    )