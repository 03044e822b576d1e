"""
gavel.errors — Exception Taxonomy
==================================

Only two failure kinds are raised as exceptions by the engine:

- :class:`InvalidInput` — a caller-supplied value failed validation before
  it ever reached the store.
- :class:`UpstreamUnavailable` — an external membership/role lookup failed.
  Reconciliation loops catch it per entity and move on.

"Not found" conditions (archiving a non-member, removing an unknown strike)
are returned as ``False`` / ``None``.  Persistence errors are whatever
SQLAlchemy raises and propagate to the command or API handler untouched.
"""

from __future__ import annotations


class GavelError(Exception):
    """Base class for all Gavel errors."""


class InvalidInput(GavelError):
    """A value was rejected by validation.

    ``field`` names the offending input so the boundary layer can tell the
    user exactly what to fix.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UpstreamUnavailable(GavelError):
    """The external membership source could not answer."""
