"""
Tests for round-robin schedule generation.
Deterministic; no duplicate fixtures; at most one game per club per round.
"""
from __future__ import annotations

from collections import Counter
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from leaguegen.simulation.scheduling import (
    round_robin_pairings,
    double_round_robin,
    BYE,
)


def test_round_robin_empty():
    assert round_robin_pairings([]) == []
    assert double_round_robin([]) == []


def test_round_robin_two_clubs():
    """2 clubs: 1 round, 1 match."""
    pairings = round_robin_pairings(["A", "B"])
    assert len(pairings) == 1
    r, h, a = pairings[0]
    assert r == 1
    assert (h, a) in [("A", "B"), ("B", "A")]


def test_round_robin_three_clubs():
    """3 clubs: add BYE, 3 rounds. Each real pair (A-B, A-C, B-C) exactly once."""
    pairings = round_robin_pairings(["A", "B", "C"])
    assert len(pairings) == 6
    real = [(h, a) for r, h, a in pairings if a is not None]
    byes = [h for r, h, a in pairings if a is None]
    assert len(real) == 3
    pairs = {tuple(sorted([h, a])) for h, a in real}
    assert pairs == {("A", "B"), ("A", "C"), ("B", "C")}
    # Each club has exactly one bye, and BYE itself never shows up
    assert sorted(byes) == ["A", "B", "C"]
    assert all(BYE not in (h, a) for h, a in real)


def test_round_robin_four_clubs():
    """4 clubs: 3 rounds, 2 matches per round, 6 matches total. Each pair once."""
    pairings = round_robin_pairings(["A", "B", "C", "D"])
    assert len(pairings) == 6
    pairs = {tuple(sorted([h, a])) for r, h, a in pairings}
    expected = {("A", "B"), ("A", "C"), ("A", "D"), ("B", "C"), ("B", "D"), ("C", "D")}
    assert pairs == expected


def test_round_robin_deterministic():
    ids = [f"c{i}" for i in range(7)]
    assert round_robin_pairings(ids) == round_robin_pairings(list(ids))


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 9, 20])
def test_double_round_robin_every_ordered_pair_once(n):
    ids = [f"c{i}" for i in range(n)]
    fixtures = double_round_robin(ids)
    assert len(fixtures) == n * (n - 1)
    ordered = Counter((h, a) for _, h, a in fixtures)
    assert all(count == 1 for count in ordered.values())
    assert all(h != a for h, a in ordered)
    home = Counter(h for _, h, _ in fixtures)
    away = Counter(a for _, _, a in fixtures)
    assert all(home[c] == n - 1 and away[c] == n - 1 for c in ids)


@pytest.mark.parametrize("n", [4, 5])
def test_double_round_robin_one_game_per_round(n):
    ids = [f"c{i}" for i in range(n)]
    fixtures = double_round_robin(ids)
    rounds: dict[int, list[str]] = {}
    for r, h, a in fixtures:
        rounds.setdefault(r, []).extend([h, a])
    for clubs in rounds.values():
        assert len(clubs) == len(set(clubs))
    legs = n - 1 if n % 2 == 0 else n
    assert sorted(rounds) == list(range(1, 2 * legs + 1))


def test_second_leg_mirrors_first():
    fixtures = double_round_robin(["A", "B", "C", "D"])
    first, second = fixtures[:6], fixtures[6:]
    assert [(r + 3, a, h) for r, h, a in first] == second
