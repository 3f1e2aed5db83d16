"""Snake-draft pick arithmetic.

In a snake draft with ``team_count`` teams the order runs 1..T in odd rounds
and T..1 in even rounds.  A team picking from ``start_slot`` s therefore holds
overall pick ``T*(r-1) + s`` in odd round r and ``T*r - s + 1`` in even round
r.  A player is treated as available at that pick only if its draft value
(ADP or another rank proxy) is at least the pick number.
"""

from __future__ import annotations

from typing import List

from draftopt.exceptions import ConfigurationError


def _check(round_number: int, start_slot: int, team_count: int) -> None:
    if team_count <= 0:
        raise ConfigurationError(f"team_count must be positive, got {team_count}")
    if not 1 <= start_slot <= team_count:
        raise ConfigurationError(f"start_slot must be within [1, {team_count}], got {start_slot}")
    if round_number <= 0:
        raise ConfigurationError(f"round must be positive, got {round_number}")


def odd_round_bound(round_number: int, start_slot: int, team_count: int) -> int:
    _check(round_number, start_slot, team_count)
    if round_number % 2 == 0:
        raise ValueError(f"round {round_number} is not odd")
    return team_count * (round_number - 1) + start_slot


def even_round_bound(round_number: int, start_slot: int, team_count: int) -> int:
    _check(round_number, start_slot, team_count)
    if round_number % 2 == 1:
        raise ValueError(f"round {round_number} is not even")
    return team_count * round_number - start_slot + 1


def round_bound(round_number: int, start_slot: int, team_count: int) -> int:
    """Overall pick number held by ``start_slot`` in ``round_number``."""

    if round_number % 2 == 1:
        return odd_round_bound(round_number, start_slot, team_count)
    return even_round_bound(round_number, start_slot, team_count)


def draft_position_bounds(round_count: int, start_slot: int, team_count: int) -> List[int]:
    """Lower bounds on draft value for rounds 1..round_count."""

    return [round_bound(r, start_slot, team_count) for r in range(1, round_count + 1)]


def snake_order(round_count: int, team_count: int) -> List[int]:
    """Slot picking at each overall pick, ``result[k-1]`` being the slot for pick k."""

    order: List[int] = []
    for r in range(1, round_count + 1):
        slots = range(1, team_count + 1)
        order.extend(slots if r % 2 == 1 else reversed(slots))
    return order
