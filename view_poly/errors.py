"""
Exception hierarchy for visibility polygon computation.
"""


class VisibilityError(Exception):
    """Base class for all errors raised by view_poly."""

    pass


class ValidationError(VisibilityError, ValueError):
    """Raised when input validation fails."""

    pass


class PreconditionError(ValidationError):
    """Raised when obstacles violate the sweep preconditions.

    Only raised by the opt-in checks in view_poly.validation; the sweep
    itself never inspects its input for crossing segments.
    """

    pass


class InconsistentStateError(VisibilityError, RuntimeError):
    """Raised when the sweep reaches a state its invariants rule out.

    In practice this means an expected ray/segment intersection failed,
    which only happens when obstacles cross each other.
    """

    pass
