from pydantic import BaseModel, Field

from munda.domain.enums import EquipmentType

from .common import ORMModel


class CustomEquipmentCreate(BaseModel):
    equipment_name: str = Field(..., min_length=1)
    equipment_type: EquipmentType = EquipmentType.WARGEAR
    equipment_category: str | None = None
    cost: int = Field(default=0, ge=0)


class CustomEquipmentUpdate(BaseModel):
    equipment_name: str | None = None
    equipment_type: EquipmentType | None = None
    equipment_category: str | None = None
    cost: int | None = Field(None, ge=0)


class CustomEquipmentRead(ORMModel):
    id: int
    user_id: int
    equipment_name: str
    equipment_type: str
    equipment_category: str | None = None
    cost: int


class _FighterProfile(BaseModel):
    movement: int = Field(default=0, ge=0)
    weapon_skill: int = Field(default=0, ge=0)
    ballistic_skill: int = Field(default=0, ge=0)
    strength: int = Field(default=0, ge=0)
    toughness: int = Field(default=0, ge=0)
    wounds: int = Field(default=0, ge=0)
    initiative: int = Field(default=0, ge=0)
    attacks: int = Field(default=0, ge=0)
    leadership: int = Field(default=0, ge=0)
    cool: int = Field(default=0, ge=0)
    willpower: int = Field(default=0, ge=0)
    intelligence: int = Field(default=0, ge=0)


class CustomFighterTypeCreate(_FighterProfile):
    fighter_type: str = Field(..., min_length=1)
    fighter_class: str = "Ganger"
    gang_type_id: int | None = None
    cost: int = Field(default=0, ge=0)
    special_rules: list[str] | None = None
    free_skill: bool = False


class CustomFighterTypeUpdate(BaseModel):
    fighter_type: str | None = None
    fighter_class: str | None = None
    gang_type_id: int | None = None
    cost: int | None = Field(None, ge=0)
    special_rules: list[str] | None = None
    free_skill: bool | None = None
    movement: int | None = None
    weapon_skill: int | None = None
    ballistic_skill: int | None = None
    strength: int | None = None
    toughness: int | None = None
    wounds: int | None = None
    initiative: int | None = None
    attacks: int | None = None
    leadership: int | None = None
    cool: int | None = None
    willpower: int | None = None
    intelligence: int | None = None


class CustomFighterTypeRead(_FighterProfile, ORMModel):
    id: int
    user_id: int
    fighter_type: str
    fighter_class: str
    gang_type_id: int | None = None
    cost: int
    special_rules: list[str] | None = None
    free_skill: bool


class CustomSkillCreate(BaseModel):
    skill_name: str = Field(..., min_length=1)
    skill_type: str = Field(..., min_length=1, description="Skill set, e.g. Ferocity")


class CustomSkillUpdate(BaseModel):
    skill_name: str | None = None
    skill_type: str | None = None


class CustomSkillRead(ORMModel):
    id: int
    user_id: int
    skill_name: str
    skill_type: str


class CustomTerritoryCreate(BaseModel):
    territory_name: str = Field(..., min_length=1)


class CustomTerritoryUpdate(BaseModel):
    territory_name: str | None = None


class CustomTerritoryRead(ORMModel):
    id: int
    user_id: int
    territory_name: str
