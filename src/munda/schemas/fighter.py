from pydantic import BaseModel, Field

from munda.domain.enums import FighterAction

from .catalog import SkillRead
from .common import ORMModel
from .effect import EffectRead
from .equipment import FighterEquipmentRead
from .summary import FighterSummary


class FighterCreate(BaseModel):
    gang_id: int = Field(..., description="Gang hiring the fighter")
    fighter_name: str = Field(..., min_length=1, description="Name of the new fighter")
    fighter_type_id: int | None = Field(None, description="Catalog fighter type")
    custom_fighter_type_id: int | None = Field(None, description="User-defined fighter type")
    cost: int | None = Field(None, ge=0, description="Credits paid (default: adjusted type cost)")
    selected_equipment_ids: list[int] = Field(
        default_factory=list, description="Extra catalog equipment bought with the fighter"
    )
    use_base_cost_for_rating: bool = Field(
        default=True, description="Rate the fighter at catalog cost instead of the amount paid"
    )


class FighterStatusUpdate(BaseModel):
    action: FighterAction
    sell_value: int | None = Field(None, ge=0, description="Credits received when selling")


class XpUpdate(BaseModel):
    xp_to_add: int = Field(..., description="Signed XP change")
    ooa_count: int = Field(default=0, ge=0, description="Enemies taken out of action")


class FighterDetailsUpdate(BaseModel):
    fighter_name: str | None = None
    label: str | None = None
    note: str | None = None
    note_backstory: str | None = None
    kills: int | None = Field(None, ge=0)
    special_rules: list[str] | None = None
    fighter_class: str | None = None
    cost_adjustment: int | None = None


class StatEffectsUpdate(BaseModel):
    stats: dict[str, int] = Field(..., description="Characteristic deltas, e.g. {'movement': 1}")


class FighterCopy(BaseModel):
    target_gang_id: int
    new_name: str | None = None


class CharacteristicAdvancementCreate(BaseModel):
    fighter_effect_type_id: int
    xp_cost: int = Field(..., ge=0)
    credits_increase: int = Field(..., ge=0)


class SkillAdvancementCreate(BaseModel):
    skill_id: int
    xp_cost: int = Field(..., ge=0)
    credits_increase: int = Field(..., ge=0)
    is_advance: bool = True


class SkillAdd(BaseModel):
    skill_id: int


class InjuryCreate(BaseModel):
    injury_type_id: int
    send_to_recovery: bool = False
    set_captured: bool = False


class LastingInjuryRoll(BaseModel):
    context: str = Field(default="lasting_injury", min_length=1)


class FighterSkillRead(ORMModel):
    id: int
    skill_id: int
    skill: SkillRead
    credits_increase: int
    xp_cost: int
    is_advance: bool


class FighterRead(ORMModel):
    id: int
    gang_id: int
    fighter_name: str
    label: str | None = None
    fighter_type: str
    fighter_type_id: int | None = None
    custom_fighter_type_id: int | None = None
    fighter_class: str
    credits: int
    cost_adjustment: int
    total_cost: int
    xp: int
    kills: int
    free_skill: bool
    killed: bool
    retired: bool
    enslaved: bool
    starved: bool
    recovery: bool
    captured: bool
    position: int
    owner_id: int | None = None
    special_rules: list[str] | None = None
    note: str | None = None
    note_backstory: str | None = None
    adjusted_characteristics: dict[str, dict[str, int]]
    equipment: list[FighterEquipmentRead] = []
    skills: list[FighterSkillRead] = []
    effects: list[EffectRead] = []


class AddFighterResult(ORMModel):
    fighter: FighterRead
    gang_credits: int
    gang_rating: int
    rating_cost: int
    created_beasts: list[FighterSummary]


class StatusResult(ORMModel):
    fighter: FighterRead | None = None
    gang_credits: int
    gang_rating: int
    gang_wealth: int


class CopyFighterResult(ORMModel):
    fighter: FighterRead
    gang_rating: int
    fighter_total_cost: int


class CharacteristicAdvancementResult(ORMModel):
    effect: EffectRead
    remaining_xp: int
    fighter_total_cost: int
    gang_rating: int


class SkillAdvancementResult(ORMModel):
    skill: FighterSkillRead
    remaining_xp: int
    fighter_total_cost: int
    gang_rating: int


class AdvancementDeleteResult(ORMModel):
    fighter: FighterRead
    xp_refunded: int
    gang_rating: int


class InjuryResult(ORMModel):
    injury: EffectRead
    fighter: FighterRead
    gang_rating: int


class FighterRatingResult(ORMModel):
    fighter: FighterRead
    gang_rating: int


class LastingInjuryRollResult(BaseModel):
    notation: str
    rolls: list[int]
    total: int
    seed: str
    injury: str
    injury_type_id: int | None = None
