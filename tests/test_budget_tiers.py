import pytest

from pcbuilder.builder import category_midpoint, find_active_category, format_budget, normalize_budget
from pcbuilder.data import default_catalog


CATEGORIES = default_catalog().categories


@pytest.mark.parametrize(
    "budget, expected",
    [
        (500, "entry"),
        (799, "entry"),
        (800, "mid"),
        (1499, "mid"),
        (1500, "high"),
        (5000, "high"),
    ],
)
def test_tier_boundaries(budget, expected):
    assert find_active_category(budget, CATEGORIES).id == expected


def test_every_slider_position_has_exactly_one_tier():
    for budget in range(500, 5001, 50):
        matches = [
            c.id
            for i, c in enumerate(CATEGORIES)
            if c.contains(budget, closed_upper=i == len(CATEGORIES) - 1)
        ]
        assert len(matches) == 1
        assert find_active_category(budget, CATEGORIES).id == matches[0]


def test_off_domain_budget_falls_back_to_mid():
    assert find_active_category(499, CATEGORIES).id == "mid"
    assert find_active_category(5001, CATEGORIES).id == "mid"
    assert find_active_category(-10, CATEGORIES).id == "mid"


def test_missing_fallback_category_is_reported():
    with pytest.raises(LookupError):
        find_active_category(10000, CATEGORIES, fallback_id="ultra")


def test_midpoints_round_down():
    midpoints = {c.id: category_midpoint(c) for c in CATEGORIES}
    assert midpoints == {"entry": 650, "mid": 1150, "high": 3250}


def test_normalize_budget_clamps_and_snaps_to_step():
    assert normalize_budget(100) == 500
    assert normalize_budget(9000) == 5000
    assert normalize_budget(1400) == 1400
    assert normalize_budget(1424) == 1400
    assert normalize_budget(1425) == 1450
    assert normalize_budget(4990) == 5000


def test_format_budget_uses_thousands_separator():
    assert format_budget(1400) == "$1,400"
    assert format_budget(500) == "$500"
