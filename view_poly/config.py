"""
Configuration for the visibility sweep.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from view_poly.errors import ValidationError

# Machine epsilon for the float64 arithmetic used throughout the sweep
EPSILON: float = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class VisibilityConfig:
    """Immutable tuning parameters for a visibility computation.

    Attributes:
        epsilon: Relative tolerance used by every floating point comparison.
            Larger world coordinates tolerate larger values; the comparisons
            are relative, so the default works across magnitudes.
        strict: If True, a failed intersection that the sweep invariants
            guarantee raises InconsistentStateError. If False, the fault is
            logged as a warning and the affected vertex pair is skipped.
        remove_collinear: If True, vertices collinear with their neighbours
            are removed from the output polygon.

    Raises:
        ValidationError: If epsilon is not a finite value in (0, 1)
        ValidationError: If strict or remove_collinear is not a bool
    """

    epsilon: float = EPSILON
    strict: bool = True
    remove_collinear: bool = True

    def __post_init__(self) -> None:
        """Validate and normalize configuration fields."""
        _validate_config(self)
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "epsilon", float(self.epsilon))


def _validate_config(config: VisibilityConfig) -> None:
    """Validate a VisibilityConfig instance.

    Raises:
        ValidationError: If any field is invalid
    """
    epsilon = config.epsilon
    if isinstance(epsilon, bool) or not isinstance(epsilon, (int, float, np.floating)):
        raise ValidationError(
            f"epsilon must be a float, got {type(epsilon).__name__}"
        )
    if not math.isfinite(epsilon) or not 0.0 < epsilon < 1.0:
        raise ValidationError(f"epsilon must be in (0, 1), got {epsilon}")

    if not isinstance(config.strict, bool):
        raise ValidationError(
            f"strict must be a bool, got {type(config.strict).__name__}"
        )
    if not isinstance(config.remove_collinear, bool):
        raise ValidationError(
            f"remove_collinear must be a bool, got {type(config.remove_collinear).__name__}"
        )


DEFAULT_CONFIG = VisibilityConfig()
