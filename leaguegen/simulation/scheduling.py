"""
Deterministic round-robin schedule generation for league seasons.

A season is a double round-robin: every club hosts every other club exactly once,
so N clubs produce N*(N-1) fixtures. The first leg is built with the circle method
and the second leg repeats it with home and away swapped.

BYE handling: when the number of clubs is odd, a virtual BYE is added. Each round
one club is paired with BYE and does not play. Bye slots are dropped from the
double round-robin output; round numbers still count them, so each club has
exactly one idle round per leg.

Same club ordering yields the same schedule.
"""
from __future__ import annotations

# Sentinel for bye when number of clubs is odd
BYE = "BYE"


def round_robin_pairings(club_ids: list[str]) -> list[tuple[int, str, str | None]]:
    """
    Single round-robin: (round_number, home_club_id, away_club_id).
    away_club_id is None when home_club_id has a bye (odd number of clubs).
    """
    if not club_ids:
        return []
    ids = list(club_ids)
    if len(ids) % 2 == 1:
        ids.append(BYE)
    n = len(ids)
    rounds = n - 1
    result: list[tuple[int, str, str | None]] = []
    # Circle method: fix slot 0, rotate 1..n-1 each round.
    order = list(range(n))
    for rnd in range(rounds):
        for i in range(n // 2):
            home_id = ids[order[i]]
            away_id: str | None = ids[order[n - 1 - i]]
            if home_id == BYE:
                home_id, away_id = away_id, None
            elif away_id == BYE:
                away_id = None
            result.append((rnd + 1, home_id, away_id))
        order = [order[0]] + [order[n - 1]] + order[1 : n - 1]
    return result


def double_round_robin(club_ids: list[str]) -> list[tuple[int, str, str]]:
    """
    Home-and-away schedule without byes: (round_number, home_club_id, away_club_id).
    Every ordered pair of distinct clubs appears exactly once.
    """
    first_leg = round_robin_pairings(club_ids)
    if not first_leg:
        return []
    rounds_per_leg = max(r for r, _, _ in first_leg)
    fixtures: list[tuple[int, str, str]] = []
    for rnd, home, away in first_leg:
        if away is not None:
            fixtures.append((rnd, home, away))
    for rnd, home, away in first_leg:
        if away is not None:
            fixtures.append((rnd + rounds_per_leg, away, home))
    return fixtures
