# models/exceptions.py
"""Error taxonomy for the curve editing core."""


class CurveEditError(Exception):
    """Base class for errors raised by the curve editing core."""
    pass


class InvalidParameter(CurveEditError, ValueError):
    """Raised when an operation is given an out-of-range parameter.

    The operation performs no mutation before raising (e.g. a split at a
    Bézier parameter outside the open interval (0, 1)).
    """
    pass


class IndexConsistencyViolation(CurveEditError, AssertionError):
    """Raised when the spatial index and the curve chains disagree.

    Removing or updating an entry that is not in the index means the caller's
    bookkeeping is broken; this is never swallowed.
    """
    pass


class UnsupportedGeometry(CurveEditError, TypeError):
    """Raised when a geometry cannot be turned into a curve chain."""
    pass
