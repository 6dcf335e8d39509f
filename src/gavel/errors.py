"""Exception types raised by the auction engine."""

from __future__ import annotations


class GavelError(Exception):
    """Base class for all errors raised by gavel."""


class InvalidTransitionError(GavelError):
    """An auction lifecycle transition was requested in the wrong state or too early."""


class InvalidConfigError(GavelError, ValueError):
    """An auction configuration violates its construction constraints."""
