"""Exceptions shared by the calculator and the lead relay."""

from __future__ import annotations


class InputValidationError(ValueError):
    """Raised when a plan fails one of the input rules."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RelayConfigError(RuntimeError):
    def __init__(self, missing: dict[str, bool]):
        names = ", ".join(name for name, is_missing in missing.items() if is_missing)
        super().__init__(f"missing relay settings: {names}")
        self.missing = missing


class RelayUpstreamError(RuntimeError):
    """The CRM endpoint could not be reached."""
