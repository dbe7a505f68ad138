"""
Spice preference matching.

A match score is a 0-100 similarity between a user's spice preferences and
a shop's spice profile. Each axis contributes ``100 - |user - shop|`` and
the three axes are combined with fixed weights:

    0.35 × spiciness  +  0.35 × stimulation  +  0.30 × aroma

Weights are held as integer percentages so the weighted sum is an exact
integer in hundredths; rounding half up is then plain integer arithmetic.
"""
from __future__ import annotations

from .models import SPICE_MAX, SPICE_MIN, SpiceParameters

AXES: tuple[str, ...] = ("spiciness", "stimulation", "aroma")

AXIS_WEIGHTS: dict[str, int] = {
    "spiciness": 35,
    "stimulation": 35,
    "aroma": 30,
}


def _clamp(value: int) -> int:
    return max(SPICE_MIN, min(SPICE_MAX, int(value)))


def axis_similarity(user_value: int, shop_value: int) -> int:
    """Return ``100 - |user - shop|`` after clamping both values to [0, 100]."""
    return SPICE_MAX - abs(_clamp(user_value) - _clamp(shop_value))


def compute_match_score(user_vector: SpiceParameters, shop_vector: SpiceParameters) -> int:
    """
    Score how closely a shop's spice profile matches a user's preferences.

    Identical vectors score 100, opposite corners score 0. Out-of-range axes
    are clamped rather than rejected, so the function never raises for a
    well-typed vector.
    """
    weighted = sum(
        AXIS_WEIGHTS[axis] * axis_similarity(getattr(user_vector, axis), getattr(shop_vector, axis))
        for axis in AXES
    )
    # weighted is in hundredths of a point; +50 then floor rounds half up
    return (weighted + 50) // 100
