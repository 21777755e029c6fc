"""
Strength Calculator: one scalar per club per season, used to bias match outcomes.
Fixed base plus additive history terms, one uniform perturbation, then a clamp.
"""
from __future__ import annotations

from typing import Any

from .rng import SeededRNG, default_rng

BASE_STRENGTH = 50.0
MIN_STRENGTH = 10.0
MAX_STRENGTH = 100.0
NOISE = 10.0

STABILITY_WEIGHT = 2.0
PREVIOUS_POSITION_PIVOT = 20
PREVIOUS_POSITION_WEIGHT = 1.5
LEAGUE_TITLE_WEIGHT = 3.0
PROMOTION_WEIGHT = 2.0
RELEGATION_WEIGHT = 1.5
VCC_TITLE_WEIGHT = 5.0  # top continental competition
CCC_TITLE_WEIGHT = 3.0


def clamp_strength(value: float) -> float:
    return max(MIN_STRENGTH, min(MAX_STRENGTH, value))


def _counter(club: Any, name: str) -> int:
    return getattr(club, name, 0) or 0


def base_strength(club: Any, previous_position: int | None = None) -> float:
    """Deterministic part of the model (everything except noise and clamp)."""
    strength = BASE_STRENGTH
    strength += _counter(club, "stability_points") * STABILITY_WEIGHT
    if previous_position is not None:
        # Positions below the pivot turn into a penalty
        strength += (PREVIOUS_POSITION_PIVOT - previous_position) * PREVIOUS_POSITION_WEIGHT
    strength += _counter(club, "league_titles") * LEAGUE_TITLE_WEIGHT
    strength += _counter(club, "promotions") * PROMOTION_WEIGHT
    strength -= _counter(club, "relegations") * RELEGATION_WEIGHT
    strength += _counter(club, "vcc_titles") * VCC_TITLE_WEIGHT
    strength += _counter(club, "ccc_titles") * CCC_TITLE_WEIGHT
    return strength


def calculate_club_strength(
    club: Any,
    previous_position: int | None = None,
    tier: int = 1,
    rng: SeededRNG | None = None,
) -> float:
    """
    Strength in [10, 100] for one club.
    tier is accepted for callers that pass league context; it does not modify the value.
    """
    rng = rng or default_rng()
    strength = base_strength(club, previous_position)
    strength += rng.uniform(-NOISE, NOISE)
    return clamp_strength(strength)
