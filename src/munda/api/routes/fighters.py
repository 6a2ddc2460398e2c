"""Fighter endpoints: hiring, status, XP, advancements, skills and injuries."""

from __future__ import annotations

from fastapi import APIRouter, status

from munda.api.deps import (
    AdvancementServiceDep,
    FighterServiceDep,
    InjuryServiceDep,
    UserDep,
)
from munda.domain.enums import AdvancementType
from munda.schemas import Envelope, ok
from munda.schemas.catalog import AvailableAdvancement
from munda.schemas.effect import EffectRead
from munda.schemas.fighter import (
    AddFighterResult,
    AdvancementDeleteResult,
    CharacteristicAdvancementCreate,
    CharacteristicAdvancementResult,
    CopyFighterResult,
    FighterCopy,
    FighterCreate,
    FighterDetailsUpdate,
    FighterRatingResult,
    FighterRead,
    FighterSkillRead,
    FighterStatusUpdate,
    InjuryCreate,
    InjuryResult,
    LastingInjuryRoll,
    LastingInjuryRollResult,
    SkillAdd,
    SkillAdvancementCreate,
    SkillAdvancementResult,
    StatEffectsUpdate,
    StatusResult,
    XpUpdate,
)

router = APIRouter(prefix="/fighters", tags=["fighters"])


@router.post("", response_model=Envelope[AddFighterResult], status_code=status.HTTP_201_CREATED)
def add_fighter(
    request: FighterCreate, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    result = fighters.add_fighter(
        user,
        request.gang_id,
        request.fighter_name,
        fighter_type_id=request.fighter_type_id,
        custom_fighter_type_id=request.custom_fighter_type_id,
        cost=request.cost,
        selected_equipment_ids=request.selected_equipment_ids,
        use_base_cost_for_rating=request.use_base_cost_for_rating,
    )
    return ok(result)


@router.get("/{fighter_id}", response_model=Envelope[FighterRead])
def get_fighter(fighter_id: int, fighters: FighterServiceDep) -> dict[str, object]:
    return ok(fighters.get_fighter(fighter_id))


@router.post("/{fighter_id}/status", response_model=Envelope[StatusResult])
def update_status(
    fighter_id: int, request: FighterStatusUpdate, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    return ok(fighters.update_status(user, fighter_id, request.action, request.sell_value))


@router.post("/{fighter_id}/xp", response_model=Envelope[FighterRead])
def update_xp(
    fighter_id: int, request: XpUpdate, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    return ok(fighters.update_xp(user, fighter_id, request.xp_to_add, request.ooa_count))


@router.patch("/{fighter_id}", response_model=Envelope[FighterRead])
def update_details(
    fighter_id: int, request: FighterDetailsUpdate, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    changes = request.model_dump(exclude_unset=True)
    return ok(fighters.update_details(user, fighter_id, changes))


@router.post("/{fighter_id}/stats", response_model=Envelope[EffectRead])
def update_stat_effects(
    fighter_id: int, request: StatEffectsUpdate, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    return ok(fighters.update_stat_effects(user, fighter_id, request.stats))


@router.post(
    "/{fighter_id}/copy",
    response_model=Envelope[CopyFighterResult],
    status_code=status.HTTP_201_CREATED,
)
def copy_fighter(
    fighter_id: int, request: FighterCopy, user: UserDep, fighters: FighterServiceDep
) -> dict[str, object]:
    result = fighters.copy_fighter(
        user, fighter_id, request.target_gang_id, new_name=request.new_name
    )
    return ok(result)


# Advancements


@router.get(
    "/{fighter_id}/advancements/available",
    response_model=Envelope[list[AvailableAdvancement]],
)
def list_available_advancements(
    fighter_id: int, advancements: AdvancementServiceDep
) -> dict[str, object]:
    return ok(advancements.list_available_advancements(fighter_id))


@router.post(
    "/{fighter_id}/advancements/characteristics",
    response_model=Envelope[CharacteristicAdvancementResult],
    status_code=status.HTTP_201_CREATED,
)
def add_characteristic_advancement(
    fighter_id: int,
    request: CharacteristicAdvancementCreate,
    user: UserDep,
    advancements: AdvancementServiceDep,
) -> dict[str, object]:
    result = advancements.add_characteristic_advancement(
        user,
        fighter_id,
        request.fighter_effect_type_id,
        request.xp_cost,
        request.credits_increase,
    )
    return ok(result)


@router.post(
    "/{fighter_id}/advancements/skills",
    response_model=Envelope[SkillAdvancementResult],
    status_code=status.HTTP_201_CREATED,
)
def add_skill_advancement(
    fighter_id: int,
    request: SkillAdvancementCreate,
    user: UserDep,
    advancements: AdvancementServiceDep,
) -> dict[str, object]:
    result = advancements.add_skill_advancement(
        user,
        fighter_id,
        request.skill_id,
        request.xp_cost,
        request.credits_increase,
        is_advance=request.is_advance,
    )
    return ok(result)


@router.delete(
    "/{fighter_id}/advancements/{advancement_id}",
    response_model=Envelope[AdvancementDeleteResult],
)
def delete_advancement(
    fighter_id: int,
    advancement_id: int,
    user: UserDep,
    advancements: AdvancementServiceDep,
    advancement_type: AdvancementType = AdvancementType.CHARACTERISTIC,
) -> dict[str, object]:
    result = advancements.delete_advancement(user, fighter_id, advancement_id, advancement_type)
    return ok(result)


# Skills


@router.post(
    "/{fighter_id}/skills",
    response_model=Envelope[FighterSkillRead],
    status_code=status.HTTP_201_CREATED,
)
def add_skill(
    fighter_id: int, request: SkillAdd, user: UserDep, advancements: AdvancementServiceDep
) -> dict[str, object]:
    return ok(advancements.add_skill(user, fighter_id, request.skill_id))


@router.delete("/{fighter_id}/skills/{fighter_skill_id}", response_model=Envelope[None])
def delete_skill(
    fighter_id: int, fighter_skill_id: int, user: UserDep, advancements: AdvancementServiceDep
) -> dict[str, object]:
    advancements.delete_skill(user, fighter_id, fighter_skill_id)
    return ok(None)


# Injuries


@router.post(
    "/{fighter_id}/injuries",
    response_model=Envelope[InjuryResult],
    status_code=status.HTTP_201_CREATED,
)
def add_injury(
    fighter_id: int, request: InjuryCreate, user: UserDep, injuries: InjuryServiceDep
) -> dict[str, object]:
    result = injuries.add_injury(
        user,
        fighter_id,
        request.injury_type_id,
        send_to_recovery=request.send_to_recovery,
        set_captured=request.set_captured,
    )
    return ok(result)


@router.delete("/{fighter_id}/injuries/{effect_id}", response_model=Envelope[FighterRatingResult])
def delete_injury(
    fighter_id: int, effect_id: int, user: UserDep, injuries: InjuryServiceDep
) -> dict[str, object]:
    return ok(injuries.delete_injury(user, fighter_id, effect_id))


@router.post("/{fighter_id}/injuries/roll", response_model=Envelope[LastingInjuryRollResult])
def roll_lasting_injury(
    fighter_id: int,
    request: LastingInjuryRoll,
    user: UserDep,
    fighters: FighterServiceDep,
    injuries: InjuryServiceDep,
) -> dict[str, object]:
    fighter = fighters.get_fighter(fighter_id)
    return ok(injuries.roll_lasting_injury(fighter.gang_id, fighter.id, request.context))
