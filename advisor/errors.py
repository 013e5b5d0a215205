"""Exception taxonomy for the extrusion advisor.

Unknown identities and invalid requests are contract violations: they are
raised immediately and never defaulted.
"""
from __future__ import annotations


class AdvisorError(Exception):
    """Base class for all advisor errors."""


class UnknownMaterialError(AdvisorError, KeyError):
    """Material code outside the fixed enumeration."""

    def __init__(self, material: object):
        self.material = material
        super().__init__(f"Unknown material: {material!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownDefectError(AdvisorError, KeyError):
    """Defect code outside the fixed enumeration."""

    def __init__(self, defect: object):
        self.defect = defect
        super().__init__(f"Unknown defect: {defect!r}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidInputError(AdvisorError, ValueError):
    """Request failed validation (non-finite or non-positive dimension, rate or setting)."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = list(errors or [])
        super().__init__(message)


class TableDataError(AdvisorError, ValueError):
    """A static table file violates its invariants."""
