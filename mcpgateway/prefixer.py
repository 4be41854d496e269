"""A text writer that prefixes every line written through it."""

from __future__ import annotations

import re
from typing import TextIO

_CHUNKS = re.compile(r"[^\n]*\n|[^\n]+")


class Prefixer:
    """Writes text to another stream, putting a prefix at the start of each line."""

    def __init__(self, writer: TextIO, prefix: str) -> None:
        self.writer = writer
        self.prefix = prefix
        self._at_line_start = True

    def write(self, payload: str) -> int:
        """Write payload with prefixes added; return the length of payload."""
        pieces: list[str] = []
        for chunk in _CHUNKS.findall(payload):
            if self._at_line_start:
                pieces.append(self.prefix)
            pieces.append(chunk)
            self._at_line_start = chunk.endswith("\n")
        self.writer.write("".join(pieces))
        return len(payload)