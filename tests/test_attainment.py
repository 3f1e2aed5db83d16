import pytest

from draftopt.analysis import attainment_ratio, excess_value, group_counts, roster_total
from draftopt.exceptions import ConfigurationError, ZeroReferenceError
from draftopt.models import EntityCatalog, EntityRecord
from draftopt.optimizer import Assignment, DraftPick


def _catalog() -> EntityCatalog:
    return EntityCatalog([
        EntityRecord(entity_id="a", group="QB", values={"proj": 300.0, "actual": 240.0, "zero": 0.0}),
        EntityRecord(entity_id="b", group="RB", values={"proj": 250.0, "actual": 260.0, "zero": 0.0}),
        EntityRecord(entity_id="c", group="RB", values={"proj": 200.0, "actual": 100.0, "zero": 0.0}),
        EntityRecord(entity_id="d", group="WR", values={"proj": 180.0, "actual": 300.0, "zero": 0.0}),
    ])


def _assignment(*ids: str) -> Assignment:
    return Assignment(picks=tuple(DraftPick(round=r, entity_id=eid) for r, eid in enumerate(ids, start=1)))


def test_roster_total_accepts_assignment_or_ids():
    catalog = _catalog()
    assert roster_total(_assignment("a", "b"), catalog, "proj") == pytest.approx(550.0)
    assert roster_total(["a", "b"], catalog, "actual") == pytest.approx(500.0)


def test_roster_total_rejects_unknown_entity_or_metric():
    with pytest.raises(ConfigurationError):
        roster_total(["a", "z"], _catalog(), "proj")
    with pytest.raises(ConfigurationError):
        roster_total(["a"], _catalog(), "pff")


def test_attainment_against_itself_is_exactly_one():
    roster = _assignment("a", "c")
    assert attainment_ratio(roster, roster, _catalog(), "actual") == 1.0


def test_attainment_against_true_optimum():
    drafted = _assignment("a", "c")
    reference = _assignment("b", "d")
    ratio = attainment_ratio(drafted, reference, _catalog(), "actual")
    assert ratio == pytest.approx(340.0 / 560.0)
    assert 0.0 <= ratio <= 1.0


def test_attainment_with_zero_reference_raises():
    with pytest.raises(ZeroReferenceError):
        attainment_ratio(["a"], ["b"], _catalog(), "zero")
    with pytest.raises(ZeroDivisionError):
        attainment_ratio(["a"], ["b"], _catalog(), "zero")


def test_excess_value():
    assert excess_value(1100.0, 1000.0) == pytest.approx(0.1)
    assert excess_value(900.0, 1000.0) == pytest.approx(-0.1)
    with pytest.raises(ZeroReferenceError):
        excess_value(10.0, 0.0)


def test_group_counts():
    assert group_counts(_assignment("a", "b", "c"), _catalog()) == {"QB": 1, "RB": 2}
