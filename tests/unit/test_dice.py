"""Tests for deterministic dice rolls and the lasting injury table."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from munda.utils.dice import (
    LASTING_INJURY_TABLE,
    generate_seed,
    lasting_injury_by_name,
    resolve_lasting_injury,
    roll_d3,
    roll_d6,
    roll_d66,
    roll_dice,
    roll_lasting_injury,
)


class TestGenerateSeed:
    def test_seed_format(self):
        assert generate_seed(3, 12, "lasting_injury:0") == "3:12:lasting_injury:0"

    def test_gang_level_roll_uses_zero_fighter(self):
        assert generate_seed(3, None, "scavenging") == "3:0:scavenging"

    def test_negative_ids_raise(self):
        with pytest.raises(ValueError, match="gang_id must be non-negative"):
            generate_seed(-1, None, "x")
        with pytest.raises(ValueError, match="fighter_id must be non-negative"):
            generate_seed(1, -4, "x")


class TestRollDice:
    def test_same_seed_same_result(self):
        assert roll_dice("1:2:test", "3d6") == roll_dice("1:2:test", "3d6")

    def test_result_structure(self):
        result = roll_dice("1:0:test", "2d6")
        assert result["notation"] == "2d6"
        assert len(result["rolls"]) == 2
        assert result["total"] == sum(result["rolls"])
        assert result["seed"] == "1:0:test"

    @pytest.mark.parametrize("notation", ["d6", "2x6", "0d6", "1d0", ""])
    def test_invalid_notation(self, notation):
        with pytest.raises(ValueError):
            roll_dice("seed", notation)

    def test_d3_and_d6_ranges(self):
        for index in range(50):
            assert 1 <= roll_d3(f"seed:{index}")["total"] <= 3
            assert 1 <= roll_d6(f"seed:{index}")["total"] <= 6

    @given(st.text(min_size=1))
    def test_rolls_stay_within_sides(self, seed):
        result = roll_dice(seed, "4d6")
        assert all(1 <= roll <= 6 for roll in result["rolls"])


class TestD66:
    @given(st.text(min_size=1))
    def test_d66_always_resolves_to_an_injury(self, seed):
        result = roll_d66(seed)
        tens, units = result["rolls"]
        assert result["total"] == tens * 10 + units
        assert resolve_lasting_injury(result["total"])

    def test_roll_lasting_injury_is_replayable(self):
        first = roll_lasting_injury("5:9:lasting_injury:1")
        assert first == roll_lasting_injury("5:9:lasting_injury:1")
        assert first["notation"] == "d66"
        assert first["injury"] == resolve_lasting_injury(first["total"])


class TestLastingInjuryTable:
    @pytest.mark.parametrize(
        ("roll", "name"),
        [
            (11, "Lesson Learned"),
            (15, "Out Cold"),
            (26, "Out Cold"),
            (42, "Partially Deafened"),
            (55, "Captured"),
            (63, "Critical Injury"),
            (66, "Memorable Death"),
        ],
    )
    def test_resolve(self, roll, name):
        assert resolve_lasting_injury(roll) == name

    @pytest.mark.parametrize("roll", [10, 17, 27, 67, 70, 0])
    def test_invalid_d66_values(self, roll):
        with pytest.raises(ValueError, match="Invalid D66 roll"):
            resolve_lasting_injury(roll)

    def test_every_d66_result_is_covered(self):
        for tens in range(1, 7):
            for units in range(1, 7):
                assert resolve_lasting_injury(tens * 10 + units)

    def test_lookup_by_name_ignores_case(self):
        assert lasting_injury_by_name("out cold") == {
            "name": "Out Cold",
            "min_roll": 15,
            "max_roll": 26,
        }

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown lasting injury"):
            lasting_injury_by_name("Stubbed Toe")

    def test_table_ranges_do_not_overlap(self):
        ranges = sorted((low, high) for low, high, _ in LASTING_INJURY_TABLE)
        for (_, previous_high), (low, _) in zip(ranges, ranges[1:]):
            assert low > previous_high
