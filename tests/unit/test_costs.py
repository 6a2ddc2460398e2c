"""Tests for fighter cost and gang rating aggregation."""

from types import SimpleNamespace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from munda.domain import costs
from munda.domain.costs import FinancialDelta


def _fighter(credits=0, **overrides):
    values = {
        "credits": credits,
        "cost_adjustment": 0,
        "equipment": [],
        "skills": [],
        "effects": [],
        "vehicles": [],
        "owned_beasts": [],
        "beast_ownership": None,
        "fighter_type_ref": None,
        "custom_fighter_type": None,
        "killed": False,
        "retired": False,
        "enslaved": False,
        "captured": False,
        "recovery": False,
        "starved": False,
    }
    values.update(overrides)
    fighter = SimpleNamespace(**values)
    fighter.is_owned_beast = fighter.beast_ownership is not None
    return fighter


def _item(purchase_cost, gang_stash=False):
    return SimpleNamespace(purchase_cost=purchase_cost, gang_stash=gang_stash)


def _effect(credits_increase=0):
    return SimpleNamespace(
        effect_name="Effect",
        type_specific_data={"credits_increase": credits_increase},
        modifiers=[],
    )


def _vehicle(cost, fighter=None, equipment=(), effects=()):
    return SimpleNamespace(
        cost=cost, fighter=fighter, equipment=list(equipment), effects=list(effects)
    )


def _with_beast(owner, beast):
    link = SimpleNamespace(owner=owner, pet=beast)
    beast.beast_ownership = link
    beast.is_owned_beast = True
    owner.owned_beasts.append(link)
    return owner


class TestFinancialDelta:
    def test_addition_and_negation(self):
        delta = FinancialDelta(rating_delta=10, credits_delta=-5) + FinancialDelta(
            stash_value_delta=3
        )
        assert delta == FinancialDelta(10, -5, 3)
        assert -delta == FinancialDelta(-10, 5, -3)

    def test_is_zero(self):
        assert FinancialDelta().is_zero
        assert not FinancialDelta(credits_delta=1).is_zero


class TestMasterCrafted:
    @pytest.mark.parametrize(("cost", "expected"), [(10, 15), (15, 20), (20, 25), (40, 50)])
    def test_rounds_up_to_next_five(self, cost, expected):
        assert costs.master_crafted_cost(cost) == expected

    @given(st.integers(min_value=0, max_value=10_000))
    def test_always_a_multiple_of_five_and_at_least_125_percent(self, cost):
        result = costs.master_crafted_cost(cost)
        assert result % 5 == 0
        assert result >= cost * 1.25
        assert result - cost * 1.25 < 5


class TestAdjustedCosts:
    def test_fighter_type_discount_beats_gang_discount(self):
        equipment = SimpleNamespace(
            cost=15,
            discounts=[
                SimpleNamespace(fighter_type_id=None, gang_type_id=2, adjusted_cost=10),
                SimpleNamespace(fighter_type_id=7, gang_type_id=None, adjusted_cost=5),
            ],
        )
        assert costs.equipment_adjusted_cost(equipment, gang_type_id=2) == 10
        assert costs.equipment_adjusted_cost(equipment, gang_type_id=2, fighter_type_id=7) == 5
        assert costs.equipment_adjusted_cost(equipment, gang_type_id=3) == 15

    def test_fighter_type_gang_cost(self):
        fighter_type = SimpleNamespace(
            cost=30, gang_costs=[SimpleNamespace(gang_type_id=4, adjusted_cost=25)]
        )
        assert costs.fighter_type_adjusted_cost(fighter_type, 4) == 25
        assert costs.fighter_type_adjusted_cost(fighter_type, 1) == 30


class TestFighterCost:
    def test_own_cost_sums_every_component(self):
        crew_vehicle = _vehicle(80, equipment=[_item(25)], effects=[_effect(5)])
        fighter = _fighter(
            60,
            cost_adjustment=-10,
            equipment=[_item(15), _item(99, gang_stash=True)],
            skills=[SimpleNamespace(credits_increase=20)],
            effects=[_effect(10), _effect()],
            vehicles=[crew_vehicle],
        )
        assert costs.fighter_own_cost(fighter) == 60 - 10 + 15 + 20 + 10 + 80 + 25 + 5

    def test_owned_beast_base_is_its_type_cost(self):
        beast = _fighter(0, fighter_type_ref=SimpleNamespace(cost=100))
        owner = _with_beast(_fighter(60), beast)

        assert costs.fighter_own_cost(beast) == 100
        assert costs.fighter_total_cost(beast) == 0
        assert costs.fighter_total_cost(owner) == 160

    def test_inactive_beast_not_rolled_into_owner(self):
        beast = _fighter(0, fighter_type_ref=SimpleNamespace(cost=100), killed=True)
        owner = _with_beast(_fighter(60), beast)
        assert costs.fighter_total_cost(owner) == 60

    def test_rating_share(self):
        fighter = _fighter(50)
        assert costs.rating_share(fighter) == 50
        fighter.retired = True
        assert costs.rating_share(fighter) == 0

    def test_beast_contribution_depends_on_owner(self):
        beast = _fighter(0, fighter_type_ref=SimpleNamespace(cost=100))
        owner = _with_beast(_fighter(60), beast)
        assert costs.status_contribution(beast) == 100
        owner.captured = True
        assert costs.status_contribution(beast) == 0
        assert not costs.rating_applies(beast)


class TestPlacement:
    def test_stash_counts_toward_wealth_only(self):
        assert costs.placement_delta(20, stash=True) == FinancialDelta(stash_value_delta=20)

    def test_unassigned_vehicle_counts_toward_wealth_only(self):
        assert costs.placement_delta(20, vehicle=_vehicle(50)) == FinancialDelta(
            stash_value_delta=20
        )

    def test_crewed_vehicle_counts_toward_rating(self):
        vehicle = _vehicle(50, fighter=_fighter(60))
        assert costs.placement_delta(20, vehicle=vehicle) == FinancialDelta(rating_delta=20)

    def test_inactive_fighter_counts_nowhere(self):
        assert costs.placement_delta(20, fighter=_fighter(60, killed=True)).is_zero


class TestGangAggregates:
    def test_rating_and_wealth(self):
        beast = _fighter(0, fighter_type_ref=SimpleNamespace(cost=100))
        leader = _with_beast(_fighter(135), beast)
        dead = _fighter(60, killed=True)
        gang = SimpleNamespace(
            fighters=[leader, beast, dead],
            equipment=[_item(15, gang_stash=True), _item(5)],
            vehicles=[_vehicle(80), _vehicle(250, fighter=leader)],
            credits=200,
        )
        leader.vehicles = [gang.vehicles[1]]

        assert costs.gang_rating(gang) == 135 + 250 + 100
        assert costs.gang_wealth(gang) == costs.gang_rating(gang) + 200 + 15 + 80

    @given(st.lists(st.integers(min_value=0, max_value=500), max_size=10))
    def test_rating_is_sum_of_active_fighters(self, credit_values):
        fighters = [_fighter(value) for value in credit_values]
        gang = SimpleNamespace(fighters=fighters, equipment=[], vehicles=[], credits=0)
        assert costs.gang_rating(gang) == sum(credit_values)
