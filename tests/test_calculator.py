import pytest

from influence_calculator.calculator import calculate, gifts_for_rarity, xp_range, xp_text
from influence_calculator.errors import InvalidLevelRange, LevelOutOfBounds
from influence_calculator.levels import LevelRecord, LevelTable


def _record(level, xp, artifact=1000, prototype=500, premium=250):
    return LevelRecord(
        level=level,
        xp_to_next_level=xp,
        item_xp={"artifact": artifact, "prototype": prototype, "premium": premium},
    )


def _flat_table():
    return LevelTable([_record(level, 2000) for level in range(1, 11)], max_level=10)


def test_two_levels_of_artifacts_without_carry():
    result = calculate(_flat_table(), 1, 3)

    assert result.total_xp_needed == 4000
    assert result.count("artifact") == 4
    assert result.count("prototype") == 8
    assert result.count("premium") == 16


def test_excess_xp_carries_into_next_level():
    records = [_record(1, 2000, artifact=1300), _record(2, 2000, artifact=1300)]
    # 2 gifts leave 600 spare, so level 2 needs 1400 more: 2 gifts again.
    assert gifts_for_rarity(records, "artifact") == 4

    records = [_record(1, 1000, artifact=1500), _record(2, 100, artifact=1500), _record(3, 1000, artifact=1500)]
    assert gifts_for_rarity(records, "artifact") == 2


def test_zero_value_gift_marks_rarity_unusable():
    records = [_record(1, 2000), _record(2, 2000, premium=0)]

    assert gifts_for_rarity(records, "premium") is None
    assert gifts_for_rarity(records, "artifact") == 4


def test_zero_value_gift_ignored_when_carry_covers_level():
    records = [_record(1, 1000, artifact=1500), _record(2, 100, artifact=0)]

    assert gifts_for_rarity(records, "artifact") == 1


def test_unusable_rarity_in_result():
    table = LevelTable(
        [_record(level, 2000, prototype=0 if level == 2 else 500) for level in range(1, 11)],
        max_level=10,
    )
    result = calculate(table, 1, 4)

    assert result.rarities["prototype"].count is None
    assert not result.rarities["prototype"].usable
    assert result.rarities["prototype"].display == "\u221e"
    assert result.rarities["artifact"].display == "6"
    assert result.rarities["artifact"].usable


def test_total_xp_matches_sum_of_range():
    table = LevelTable(
        [_record(level, 1000 * level) for level in range(1, 11)],
        max_level=10,
    )
    for start in range(1, 10):
        for target in range(start + 1, 11):
            expected = sum(1000 * level for level in range(start, target))
            assert calculate(table, start, target).total_xp_needed == expected


def test_counts_never_decrease_as_range_widens():
    table = LevelTable(
        [_record(level, 700 + 300 * level, artifact=900, prototype=450, premium=175) for level in range(1, 11)],
        max_level=10,
    )
    for rarity in ("artifact", "prototype", "premium"):
        counts = [calculate(table, 1, target).count(rarity) for target in range(2, 11)]
        assert counts == sorted(counts)


@pytest.mark.parametrize("start, target", [(3, 3), (5, 2)])
def test_rejects_empty_or_reversed_range(start, target):
    with pytest.raises(InvalidLevelRange):
        calculate(_flat_table(), start, target)


@pytest.mark.parametrize("start, target", [(0, 5), (1, 11), (-2, 3)])
def test_rejects_levels_out_of_bounds(start, target):
    with pytest.raises(LevelOutOfBounds) as excinfo:
        calculate(_flat_table(), start, target)
    assert excinfo.value.title == "Invalid Level Range"


def test_xp_range_and_text():
    records = [_record(1, 2000, premium=325), _record(2, 2000, premium=260)]

    assert xp_range(records, "premium") == (260, 325)
    assert xp_text(260, 325) == "260 - 325 XP each"
    assert xp_text(1300, 1300) == "1,300 XP each"
