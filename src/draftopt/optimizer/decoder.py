"""Turn raw solver values into an ordered draft assignment."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from draftopt.exceptions import InvariantViolation


@dataclass(frozen=True)
class DraftPick:
    round: int
    entity_id: str


@dataclass(frozen=True)
class Assignment:
    picks: Tuple[DraftPick, ...]

    def __len__(self) -> int:
        return len(self.picks)

    def __iter__(self):
        return iter(self.picks)

    @property
    def entity_ids(self) -> Tuple[str, ...]:
        return tuple(pick.entity_id for pick in self.picks)

    def as_pairs(self) -> List[Tuple[int, str]]:
        return [(pick.round, pick.entity_id) for pick in self.picks]


def decode_assignment(values: Mapping[Tuple[str, int], float], round_count: int) -> Assignment:
    """Return one pick per round from ``values`` keyed by (entity_id, round).

    Values are rounded to the nearest integer before comparing with 1.  A round
    with zero or several selections, or an entity selected twice, means the
    solution does not match the model and raises InvariantViolation.
    """

    selected: Dict[int, List[str]] = defaultdict(list)
    for (entity_id, round_number), raw in values.items():
        if round(raw) == 1:
            selected[round_number].append(entity_id)

    stray = sorted(r for r in selected if not 1 <= r <= round_count)
    if stray:
        raise InvariantViolation(f"Selections found outside rounds 1..{round_count}: {stray}")

    picks: List[DraftPick] = []
    seen: Dict[str, int] = {}
    for round_number in range(1, round_count + 1):
        chosen = selected.get(round_number, [])
        if len(chosen) != 1:
            raise InvariantViolation(
                f"Round {round_number} has {len(chosen)} selected entities, expected exactly 1"
                + (f" ({', '.join(sorted(chosen))})" if chosen else "")
            )
        entity_id = chosen[0]
        if entity_id in seen:
            raise InvariantViolation(
                f"Entity {entity_id!r} selected in rounds {seen[entity_id]} and {round_number}"
            )
        seen[entity_id] = round_number
        picks.append(DraftPick(round=round_number, entity_id=entity_id))

    return Assignment(picks=tuple(picks))
