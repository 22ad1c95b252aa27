"""Engine-level error types."""

from __future__ import annotations


class InvariantViolation(AssertionError):
    """A caller broke an input contract of the rating engine.

    Raised for notes that are not time-ordered, a foot stepping into the
    past, or a decay factor outside ``[0, 1]``. These are programming
    errors, not runtime conditions; the engine never catches them.
    """
