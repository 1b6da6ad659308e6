"""Upstream failure taxonomy. All three kinds are handled identically by the fallback chain."""

from __future__ import annotations

from typing import Optional


class ProviderError(Exception):
    """Base class for anything that went wrong talking to the quotes provider."""


class TransportError(ProviderError):
    """Network failure, timeout, or non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ShapeError(ProviderError):
    """Body did not parse or did not have the expected structure."""


class EmptyResultError(ProviderError):
    """The call succeeded but produced zero usable records."""
