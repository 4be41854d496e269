"""Small helpers used by the gateway: health state, image names and server selection."""

from __future__ import annotations

import threading
from collections.abc import Iterable

_DIGEST_SEPARATOR = "@sha256:"
_VERIFIABLE_PREFIX = "mcp/"


class HealthState:
    """A thread-safe flag that turns on once the gateway is ready."""

    def __init__(self) -> None:
        self._healthy = threading.Event()

    def is_healthy(self) -> bool:
        """Return True once set_healthy has been called."""
        return self._healthy.is_set()

    def set_healthy(self) -> None:
        """Mark the gateway as healthy."""
        self._healthy.set()


def image_base_name(name: str) -> str:
    """Strip a ``@sha256:`` digest from an image reference."""
    before, separator, _ = name.partition(_DIGEST_SEPARATOR)
    return before if separator else name


def image_base_names(names: Iterable[str]) -> list[str]:
    """Strip digests from every image reference."""
    return [image_base_name(name) for name in names]


def verifiable_images(images: Iterable[str]) -> list[str]:
    """Return the images whose signatures can be verified (those under ``mcp/``)."""
    return [image for image in images if image.startswith(_VERIFIABLE_PREFIX)]


def parse_server_names(value: str) -> list[str]:
    """Split a comma-separated list of server names, dropping blanks."""
    return [name for name in (part.strip() for part in value.split(",")) if name]