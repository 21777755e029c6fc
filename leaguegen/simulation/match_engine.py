"""
Match Result Generator: one fixture's scoreline from two club strengths.
Coarse three-way model: draw the outcome category first, then a scoreline
that agrees with it. Not a Poisson goals model.
"""
from __future__ import annotations

from dataclasses import dataclass

from .rng import SeededRNG, default_rng
from .schemas import MatchOutcome, MatchResult

HOME_ADVANTAGE = 5.0
BASE_HOME_WIN = 0.35
MIN_HOME_WIN = 0.15
MAX_HOME_WIN = 0.65
BASE_DRAW = 0.28
MIN_DRAW = 0.15
MAX_WINNER_GOALS = 3
MAX_DRAW_GOALS = 2


@dataclass(frozen=True)
class MatchProbabilities:
    """Outcome probabilities for one fixture, home perspective."""
    home_win: float
    draw: float

    @property
    def away_win(self) -> float:
        return 1.0 - self.home_win - self.draw


def match_probabilities(home_strength: float, away_strength: float) -> MatchProbabilities:
    diff = home_strength - away_strength
    home_win = BASE_HOME_WIN + (diff + HOME_ADVANTAGE) / 200
    home_win = max(MIN_HOME_WIN, min(MAX_HOME_WIN, home_win))
    draw = max(MIN_DRAW, BASE_DRAW - abs(diff) / 400)
    return MatchProbabilities(home_win=home_win, draw=draw)


def sample_outcome(probs: MatchProbabilities, rng: SeededRNG) -> MatchOutcome:
    r = rng.random()
    if r < probs.home_win:
        return MatchOutcome.HOME_WIN
    if r < probs.home_win + probs.draw:
        return MatchOutcome.DRAW
    return MatchOutcome.AWAY_WIN


def sample_scoreline(outcome: MatchOutcome, rng: SeededRNG) -> tuple[int, int]:
    """(home_goals, away_goals) for the given outcome. The winner always scores strictly more."""
    if outcome == MatchOutcome.DRAW:
        goals = rng.randint(0, MAX_DRAW_GOALS)
        return goals, goals
    winner = rng.randint(1, MAX_WINNER_GOALS)
    loser = rng.randint(0, winner - 1)
    if outcome == MatchOutcome.HOME_WIN:
        return winner, loser
    return loser, winner


def generate_match_result(
    home_strength: float,
    away_strength: float,
    rng: SeededRNG | None = None,
) -> MatchResult:
    rng = rng or default_rng()
    probs = match_probabilities(home_strength, away_strength)
    outcome = sample_outcome(probs, rng)
    home_goals, away_goals = sample_scoreline(outcome, rng)
    return MatchResult(home_goals=home_goals, away_goals=away_goals, outcome=outcome)
