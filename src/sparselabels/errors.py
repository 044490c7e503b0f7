# src/sparselabels/errors.py

"""
Exception taxonomy for label indexes.

Every failure is local and synchronous: it is raised by the call that caused
it, before any new index is built. Each error derives from
:class:`LabelIndexError` *and* from the builtin exception a generic caller
would expect (``ValueError`` or ``KeyError``), so ``except ValueError`` keeps
working for code that does not know about this package.

A selector that is absent from a catalog is not an error. :func:`where`
reports it with the :data:`NOT_FOUND` sentinel instead.

Examples
--------
>>> from sparselabels.errors import DuplicateLabel, LabelIndexError
>>> issubclass(DuplicateLabel, ValueError), issubclass(DuplicateLabel, LabelIndexError)
(True, True)
>>> from sparselabels.errors import NOT_FOUND
>>> bool(NOT_FOUND), repr(NOT_FOUND)
(False, 'NOT_FOUND')
"""

from __future__ import annotations

__all__ = [
    "LabelIndexError",
    "DuplicateLabel",
    "DuplicateCategory",
    "UnknownCategory",
    "CategoryMismatch",
    "CategoryConflict",
    "ShapeMismatch",
    "LossyConversion",
    "InvalidRecord",
    "NOT_FOUND",
]


class LabelIndexError(Exception):
    """Root of every error raised by this package."""


class DuplicateLabel(LabelIndexError, ValueError):
    """A label string already exists somewhere in the catalog."""


class DuplicateCategory(LabelIndexError, ValueError):
    """A category name already exists in the index."""


class UnknownCategory(LabelIndexError, KeyError):
    """A requested category is not present in the index."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class CategoryMismatch(LabelIndexError, ValueError):
    """Merge operands do not share the same set of category names."""


class CategoryConflict(LabelIndexError, ValueError):
    """A label resolves to different categories in two operands (or in one call)."""


class ShapeMismatch(LabelIndexError, ValueError):
    """A row vector, label sequence or splice index has the wrong length/count."""


class LossyConversion(LabelIndexError, ValueError):
    """The dense form cannot represent a row with several labels in one category."""


class InvalidRecord(LabelIndexError, ValueError):
    """An interchange record is malformed or would break an index invariant."""


class _NotFoundType:
    """Singleton marker for selectors that are absent from the catalog."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_NotFoundType, ())


NOT_FOUND = _NotFoundType()
