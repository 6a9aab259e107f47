"""Device naming helpers independent of any audio backend."""

from __future__ import annotations

from typing import Iterable, Sequence

from .constants import PREFERRED_DEVICE_HINTS


def normalize_hints(hints: Iterable[str] | str | None) -> tuple[str, ...]:
    """Return lower-cased, non-empty hint tokens.

    Accepts either an iterable of tokens or a comma-separated string as found
    in config files.
    """
    if hints is None:
        return PREFERRED_DEVICE_HINTS
    if isinstance(hints, str):
        hints = hints.split(",")
    return tuple(token.strip().lower() for token in hints if token and token.strip())


def find_preferred_device(devices: Sequence[str], hints: Iterable[str]) -> str | None:
    """Return the first device whose name contains any hint, ignoring case.

    Devices are scanned in the given order, so the backend's ordering decides
    ties between several matching devices.
    """
    tokens = normalize_hints(hints)
    if not tokens:
        return None
    for name in devices:
        lowered = name.lower()
        if any(token in lowered for token in tokens):
            return name
    return None


__all__ = ["find_preferred_device", "normalize_hints"]
