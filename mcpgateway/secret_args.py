"""Parsing of secret arguments given on the command line."""

from __future__ import annotations

from dataclasses import dataclass

CREDSTORE = "credstore"


@dataclass(frozen=True)
class Secret:
    """A secret name with its value (empty when a provider supplies it)."""

    key: str
    value: str


def is_direct_value_provider(provider: str) -> bool:
    """Return True if secrets for this provider are given as key=value."""
    return provider in ("", CREDSTORE)


def parse_arg(arg: str, provider: str = "") -> Secret:
    """Parse a ``key=value`` argument, or a bare key for indirect providers."""
    direct = is_direct_value_provider(provider)
    if not direct and "=" in arg:
        raise ValueError(f"provider cannot be used with key=value pairs: {arg}")
    if not direct:
        return Secret(key=arg, value="")
    parts = arg.split("=")
    if len(parts) != 2:
        raise ValueError(f"no key=value pair: {arg}")
    return Secret(key=parts[0], value=parts[1])


def is_valid_provider(provider: str) -> bool:
    """Return True for the default provider, the credential store or an oauth/ provider."""
    return provider in ("", CREDSTORE) or provider.startswith("oauth/")