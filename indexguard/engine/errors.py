"""Exceptions raised by the indexing engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine errors."""


class UnknownPageTypeError(EngineError, ValueError):
    """Raised when a payload is submitted for a page type the gate cannot read."""

    def __init__(self, page_type: str) -> None:
        super().__init__(f"Unknown page type for indexing checks: {page_type!r}")
        self.page_type = page_type


class CapabilityDisabledError(EngineError):
    """Raised when a caller requires a capability that is not implemented."""

    def __init__(self, capability: str) -> None:
        super().__init__(f"Capability is not available: {capability}")
        self.capability = capability
