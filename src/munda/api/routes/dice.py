"""Deterministic dice rolls."""

from __future__ import annotations

from fastapi import APIRouter

from munda.schemas import Envelope, ok
from munda.schemas.dice import DiceRollRequest, DiceRollResult, LastingInjuryEntry
from munda.utils import dice

router = APIRouter(prefix="/dice", tags=["dice"])


@router.post("/roll", response_model=Envelope[DiceRollResult])
def roll(request: DiceRollRequest) -> dict[str, object]:
    seed = dice.generate_seed(request.gang_id, request.fighter_id, request.context)
    if request.notation.lower() == "d66":
        return ok(dice.roll_d66(seed))
    return ok(dice.roll_dice(seed, request.notation))


@router.post("/lasting-injury", response_model=Envelope[DiceRollResult])
def roll_lasting_injury(request: DiceRollRequest) -> dict[str, object]:
    seed = dice.generate_seed(request.gang_id, request.fighter_id, request.context)
    return ok(dice.roll_lasting_injury(seed))


@router.get("/lasting-injuries", response_model=Envelope[list[LastingInjuryEntry]])
def lasting_injury_table() -> dict[str, object]:
    return ok(
        [
            {"name": name, "min_roll": low, "max_roll": high}
            for low, high, name in dice.LASTING_INJURY_TABLE
        ]
    )


@router.get("/lasting-injuries/{name}", response_model=Envelope[LastingInjuryEntry])
def lasting_injury(name: str) -> dict[str, object]:
    return ok(dice.lasting_injury_by_name(name))
