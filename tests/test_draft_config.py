import pytest

from draftopt.config import DEFAULT_CATEGORY_REQUIREMENTS, DraftConfig, get_format, iter_formats
from draftopt.exceptions import ConfigurationError


def test_get_format_is_case_insensitive():
    config = get_format("standard")
    assert config.team_count == 12
    assert config.round_count == 14
    assert config.start_slot == 6
    assert dict(config.category_requirements) == DEFAULT_CATEGORY_REQUIREMENTS
    assert dict(config.max_per_group) == {"QB": 2}
    assert config.max_per_conflict_bucket == 3


def test_get_format_no_te_drops_requirement():
    config = get_format("no-te")
    assert "te" not in config.category_requirements
    assert "qb" in config.category_requirements


def test_get_format_missing_raises():
    with pytest.raises(KeyError):
        get_format("AUCTION")


def test_iter_formats_validate():
    for _, config in iter_formats():
        config.validate()


def test_replace_does_not_share_mappings():
    base = DraftConfig()
    requirements = {"qb": 1}
    changed = base.replace(category_requirements=requirements, start_slot=1)
    requirements["rb"] = 3

    assert dict(changed.category_requirements) == {"qb": 1}
    assert changed.start_slot == 1
    assert base.start_slot == 6
    assert "rb" in base.category_requirements


def test_without_helpers():
    base = DraftConfig()
    assert "te" not in base.without_category("TE").category_requirements
    assert dict(base.without_group_caps().max_per_group) == {}
    assert dict(base.max_per_group) == {"QB": 2}


@pytest.mark.parametrize(
    "changes",
    [
        {"round_count": 0},
        {"team_count": 0},
        {"start_slot": 0},
        {"start_slot": 13},
        {"category_requirements": {"qb": -1}},
        {"max_per_group": {"QB": -2}},
        {"max_per_conflict_bucket": -1},
    ],
)
def test_validate_rejects_malformed_config(changes):
    with pytest.raises(ConfigurationError):
        DraftConfig().replace(**changes).validate()
