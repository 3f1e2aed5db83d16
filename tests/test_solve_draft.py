from collections import Counter

import pytest

from draftopt.config import DraftConfig
from draftopt.exceptions import ConfigurationError, InfeasibleError
from draftopt.models import EntityCatalog, EntityRecord
from draftopt.optimizer import solve_draft
from draftopt.optimizer.snake import round_bound


_GROUP_CYCLE = ("QB", "RB", "WR", "TE", "RB", "WR", "WR", "RB")


def _league_catalog() -> EntityCatalog:
    entities = []
    for i in range(48):
        group = _GROUP_CYCLE[i % 8]
        entities.append(
            EntityRecord(
                entity_id=f"{group.lower()}{i:02d}",
                group=group,
                eligibility={"flex"} if group != "QB" else set(),
                values={"proj": float(300 - 5 * i + (i * 37 % 11)), "actual": float(i * 53 % 97 + 50)},
                draft_values={"adp": float(i + 1), "max_adp": float(i + 7)},
                conflict_bucket=str(5 + i % 4),
            )
        )
    return EntityCatalog(entities)


def _league_config(**changes) -> DraftConfig:
    config = DraftConfig(
        round_count=6,
        team_count=4,
        start_slot=2,
        category_requirements={"qb": 1, "rb": 1, "wr": 1, "te": 1, "flex": 1},
        max_per_group={"QB": 1},
        max_per_conflict_bucket=2,
        active_metric="proj",
        active_proxy="adp",
    )
    return config.replace(**changes) if changes else config


def test_three_entity_draft_picks_best_feasible_roster(capsys):
    catalog = EntityCatalog([
        EntityRecord(entity_id="A", group="QB", values={"m": 100.0}, draft_values={"rank": 1.0}),
        EntityRecord(entity_id="B", group="RB", values={"m": 90.0}, draft_values={"rank": 2.0}),
        EntityRecord(entity_id="C", group="RB", values={"m": 80.0}, draft_values={"rank": 2.0}),
    ])
    config = DraftConfig(
        round_count=2,
        team_count=1,
        start_slot=1,
        category_requirements={"qb": 1, "rb": 1},
        max_per_group={},
        max_per_conflict_bucket=None,
        active_metric="m",
        active_proxy="rank",
    )

    result = solve_draft(catalog, config)

    assert result.assignment.as_pairs() == [(1, "A"), (2, "B")]
    assert result.objective == pytest.approx(190.0)
    assert result.status == "Optimal"
    assert "Total Projected Points:\t190" in capsys.readouterr().out


def test_solved_roster_satisfies_every_constraint():
    catalog = _league_catalog()
    config = _league_config()
    result = solve_draft(catalog, config, verbose=False)
    picks = list(result.assignment)
    drafted = [catalog[pick.entity_id] for pick in picks]

    assert [pick.round for pick in picks] == list(range(1, 7))
    assert len(set(result.assignment.entity_ids)) == 6

    for category, minimum in config.category_requirements.items():
        assert sum(entity.is_eligible(category) for entity in drafted) >= minimum
    assert sum(entity.group == "QB" for entity in drafted) <= 1
    assert max(Counter(entity.conflict_bucket for entity in drafted).values()) <= 2

    for pick, entity in zip(picks, drafted):
        assert entity.draft_value("adp") >= round_bound(pick.round, 2, 4)

    assert result.objective == pytest.approx(sum(entity.value("proj") for entity in drafted))


def test_solve_is_quiet_when_not_verbose(capsys):
    solve_draft(_league_catalog(), _league_config(), verbose=False)
    assert capsys.readouterr().out == ""


def test_unsatisfiable_category_minimum_is_infeasible():
    catalog = EntityCatalog([
        EntityRecord(entity_id="qb1", group="QB", values={"m": 300.0}, draft_values={"rank": 5.0}),
        EntityRecord(entity_id="rb1", group="RB", values={"m": 200.0}, draft_values={"rank": 5.0}),
        EntityRecord(entity_id="rb2", group="RB", values={"m": 150.0}, draft_values={"rank": 5.0}),
    ])
    config = DraftConfig(
        round_count=2,
        team_count=1,
        start_slot=1,
        category_requirements={"qb": 2},
        max_per_group={},
        max_per_conflict_bucket=None,
        active_metric="m",
        active_proxy="rank",
    )
    with pytest.raises(InfeasibleError):
        solve_draft(catalog, config, verbose=False)


def test_category_without_eligible_entities_fails_before_solve():
    catalog = EntityCatalog([
        EntityRecord(entity_id="qb1", group="QB", values={"m": 300.0}, draft_values={"rank": 5.0}),
    ])
    config = DraftConfig(
        round_count=1,
        team_count=1,
        start_slot=1,
        category_requirements={"te": 1},
        active_metric="m",
        active_proxy="rank",
    )
    with pytest.raises(ConfigurationError):
        solve_draft(catalog, config, verbose=False)


def _stacked_catalog() -> EntityCatalog:
    quarterbacks = [
        EntityRecord(entity_id=f"qb{i}", group="QB", values={"m": 400.0}, draft_values={"rank": 10.0})
        for i in range(4)
    ]
    backs = [
        EntityRecord(entity_id=f"rb{i}", group="RB", values={"m": 100.0}, draft_values={"rank": 10.0})
        for i in range(4)
    ]
    return EntityCatalog(quarterbacks + backs)


def _stacked_config(**changes) -> DraftConfig:
    config = DraftConfig(
        round_count=4,
        team_count=1,
        start_slot=1,
        category_requirements={},
        max_per_group={"QB": 2},
        max_per_conflict_bucket=None,
        active_metric="m",
        active_proxy="rank",
    )
    return config.replace(**changes) if changes else config


def test_group_cap_limits_scarce_group():
    catalog = _stacked_catalog()
    result = solve_draft(catalog, _stacked_config(), verbose=False)
    groups = Counter(catalog[eid].group for eid in result.assignment.entity_ids)
    assert groups["QB"] == 2
    assert result.objective == pytest.approx(1000.0)


def test_removing_group_caps_allows_stacking():
    result = solve_draft(_stacked_catalog(), _stacked_config().without_group_caps(), verbose=False)
    assert result.objective == pytest.approx(1600.0)


def _bye_catalog() -> EntityCatalog:
    heavy = [
        EntityRecord(entity_id=f"w7_{i}", group="WR", values={"m": 300.0}, draft_values={"rank": 20.0}, conflict_bucket="7")
        for i in range(6)
    ]
    light = [
        EntityRecord(entity_id=f"w9_{i}", group="WR", values={"m": 100.0}, draft_values={"rank": 20.0}, conflict_bucket="9")
        for i in range(3)
    ]
    return EntityCatalog(heavy + light)


@pytest.mark.parametrize("cap, expected", [(3, 1200.0), (None, 1800.0)])
def test_conflict_bucket_cap(cap, expected):
    config = DraftConfig(
        round_count=6,
        team_count=1,
        start_slot=1,
        category_requirements={},
        max_per_group={},
        max_per_conflict_bucket=cap,
        active_metric="m",
        active_proxy="rank",
    )
    result = solve_draft(_bye_catalog(), config, verbose=False)
    assert result.objective == pytest.approx(expected)
