"""Reading and merging of the gateway's configuration sources."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar

V = TypeVar("V")


class SecretsFileError(ValueError):
    """Raised when a secrets file cannot be read or holds an invalid line."""


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def read_secrets_file(path: str | Path) -> dict[str, str]:
    """Read ``KEY=value`` lines from a .env-style file.

    Lines starting with ``#`` and blank lines are skipped. Any other line
    without ``=`` is an error.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SecretsFileError(f"reading secrets from {path}: {exc}") from exc

    secrets: dict[str, str] = {}
    for raw in text.split("\n"):
        line = raw.removesuffix("\r")
        if line.startswith("#"):
            continue
        line = line.strip()
        if not line:
            continue
        key, separator, value = line.partition("=")
        if not separator:
            raise SecretsFileError(f"invalid line in secrets file: {line}")
        secrets[key] = value
    return secrets


def merge_by_server(
    sources: Iterable[tuple[str, Mapping[str, V]]], label: str
) -> dict[str, V]:
    """Merge per-server entries from several sources; later sources win.

    Each source is a ``(path, entries)`` pair; sources with an empty path are
    skipped. A warning naming ``label`` (such as "registry" or "config file")
    is logged for every server that an earlier source already defined.
    """
    merged: dict[str, V] = {}
    for path, entries in sources:
        if not path:
            continue
        for server_name, value in entries.items():
            if server_name in merged:
                _log(
                    f"Warning: overlapping server '{server_name}' found in {label} "
                    f"'{path}', overwriting previous value"
                )
            merged[server_name] = value
    return merged


def collect_secret_names(
    server_secrets: Mapping[str, Iterable[str]], server_names: Iterable[str]
) -> list[str]:
    """List the secret names needed by the given servers, in order.

    Server names are stripped of surrounding whitespace; names that are not in
    ``server_secrets`` are ignored.
    """
    names: list[str] = []
    for server_name in server_names:
        secrets: Any = server_secrets.get(server_name.strip())
        if secrets is None:
            continue
        names.extend(secrets)
    return names