"""Catalog reads and user-defined custom content."""

import logging
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.effects import STAT_NAMES
from munda.domain.enums import EffectCategory, EquipmentType
from munda.models import (
    CustomEquipment,
    CustomFighterType,
    CustomSkill,
    CustomTerritory,
    Equipment,
    FighterEffectType,
    FighterType,
    GangType,
    Profile,
    Skill,
    VehicleType,
)
from munda.models.catalog import profile_fields
from munda.services.access import get_or_404
from munda.services.effect_builder import effect_types_in_category

logger = logging.getLogger(__name__)

CUSTOM_EQUIPMENT_FIELDS = frozenset(
    {"equipment_name", "equipment_type", "equipment_category", "cost"}
)
CUSTOM_FIGHTER_TYPE_FIELDS = frozenset(
    {"fighter_type", "fighter_class", "gang_type_id", "cost", "special_rules", "free_skill"}
    | set(STAT_NAMES)
)
CUSTOM_SKILL_FIELDS = frozenset({"skill_name", "skill_type"})
CUSTOM_TERRITORY_FIELDS = frozenset({"territory_name"})


def _check_fields(changes: dict[str, Any], allowed: frozenset[str]) -> None:
    for field in changes:
        if field not in allowed:
            raise ValueError(f"Field '{field}' cannot be set")
    if changes.get("cost") is not None and changes["cost"] < 0:
        raise ValueError("Cost cannot be negative")
    if "equipment_type" in changes:
        EquipmentType(changes["equipment_type"])


def _ensure_owner(row: Any, user: Profile) -> None:
    if row.user_id != user.id and not user.is_admin:
        raise PermissionError("You do not have permission to modify this custom content")


def _trimmed_name(values: dict[str, Any], field: str, label: str) -> None:
    """Strip trailing whitespace from a name field and reject blank names."""
    if field in values:
        values[field] = (values[field] or "").rstrip()
        if not values[field].strip():
            raise ValueError(f"{label} is required")


class CatalogService:
    """Service for reading the catalog and managing custom content."""

    def __init__(self, session: Session):
        self.session = session

    # Custom equipment

    def create_custom_equipment(self, user: Profile, values: dict[str, Any]) -> CustomEquipment:
        try:
            _check_fields(values, CUSTOM_EQUIPMENT_FIELDS)
            if not (values.get("equipment_name") or "").strip():
                raise ValueError("Equipment name is required")
            item = CustomEquipment(user_id=user.id, **values)
            self.session.add(item)
            self.session.commit()
            return item
        except Exception:
            self.session.rollback()
            raise

    def update_custom_equipment(
        self, user: Profile, custom_equipment_id: int, changes: dict[str, Any]
    ) -> CustomEquipment:
        try:
            item = get_or_404(self.session, CustomEquipment, custom_equipment_id, "Custom equipment")
            _ensure_owner(item, user)
            _check_fields(changes, CUSTOM_EQUIPMENT_FIELDS)
            for field, value in changes.items():
                setattr(item, field, value)
            self.session.commit()
            return item
        except Exception:
            self.session.rollback()
            raise

    def delete_custom_equipment(self, user: Profile, custom_equipment_id: int) -> None:
        try:
            item = get_or_404(self.session, CustomEquipment, custom_equipment_id, "Custom equipment")
            _ensure_owner(item, user)
            self.session.delete(item)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def list_custom_equipment(self, user: Profile) -> list[CustomEquipment]:
        stmt = (
            select(CustomEquipment)
            .where(CustomEquipment.user_id == user.id)
            .order_by(CustomEquipment.equipment_name)
        )
        return list(self.session.execute(stmt).scalars())

    # Custom fighter types

    def create_custom_fighter_type(
        self, user: Profile, values: dict[str, Any]
    ) -> CustomFighterType:
        try:
            _check_fields(values, CUSTOM_FIGHTER_TYPE_FIELDS)
            if not (values.get("fighter_type") or "").strip():
                raise ValueError("Fighter type name is required")
            if values.get("gang_type_id") is not None:
                get_or_404(self.session, GangType, values["gang_type_id"], "Gang type")
            fighter_type = CustomFighterType(user_id=user.id, **values)
            self.session.add(fighter_type)
            self.session.commit()
            return fighter_type
        except Exception:
            self.session.rollback()
            raise

    def update_custom_fighter_type(
        self, user: Profile, custom_fighter_type_id: int, changes: dict[str, Any]
    ) -> CustomFighterType:
        try:
            fighter_type = get_or_404(
                self.session, CustomFighterType, custom_fighter_type_id, "Custom fighter type"
            )
            _ensure_owner(fighter_type, user)
            _check_fields(changes, CUSTOM_FIGHTER_TYPE_FIELDS)
            for field, value in changes.items():
                setattr(fighter_type, field, value)
            self.session.commit()
            return fighter_type
        except Exception:
            self.session.rollback()
            raise

    def delete_custom_fighter_type(self, user: Profile, custom_fighter_type_id: int) -> None:
        try:
            fighter_type = get_or_404(
                self.session, CustomFighterType, custom_fighter_type_id, "Custom fighter type"
            )
            _ensure_owner(fighter_type, user)
            self.session.delete(fighter_type)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def list_custom_fighter_types(self, user: Profile) -> list[CustomFighterType]:
        stmt = (
            select(CustomFighterType)
            .where(CustomFighterType.user_id == user.id)
            .order_by(CustomFighterType.fighter_type)
        )
        return list(self.session.execute(stmt).scalars())

    # Custom skills

    def create_custom_skill(self, user: Profile, values: dict[str, Any]) -> CustomSkill:
        try:
            values = dict(values)
            _check_fields(values, CUSTOM_SKILL_FIELDS)
            _trimmed_name(values, "skill_name", "Skill name")
            _trimmed_name(values, "skill_type", "Skill set")
            if "skill_name" not in values or "skill_type" not in values:
                raise ValueError("Skill name and skill set are required")
            skill = CustomSkill(user_id=user.id, **values)
            self.session.add(skill)
            self.session.commit()
            logger.info("profile %s created custom skill %s", user.id, skill.id)
            return skill
        except Exception:
            self.session.rollback()
            raise

    def update_custom_skill(
        self, user: Profile, custom_skill_id: int, changes: dict[str, Any]
    ) -> CustomSkill:
        try:
            skill = get_or_404(self.session, CustomSkill, custom_skill_id, "Custom skill")
            _ensure_owner(skill, user)
            changes = dict(changes)
            _check_fields(changes, CUSTOM_SKILL_FIELDS)
            _trimmed_name(changes, "skill_name", "Skill name")
            _trimmed_name(changes, "skill_type", "Skill set")
            for field, value in changes.items():
                setattr(skill, field, value)
            self.session.commit()
            return skill
        except Exception:
            self.session.rollback()
            raise

    def delete_custom_skill(self, user: Profile, custom_skill_id: int) -> None:
        try:
            skill = get_or_404(self.session, CustomSkill, custom_skill_id, "Custom skill")
            _ensure_owner(skill, user)
            self.session.delete(skill)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def list_custom_skills(self, user: Profile) -> list[CustomSkill]:
        stmt = (
            select(CustomSkill)
            .where(CustomSkill.user_id == user.id)
            .order_by(CustomSkill.skill_type, CustomSkill.skill_name)
        )
        return list(self.session.execute(stmt).scalars())

    # Custom territories

    def create_custom_territory(self, user: Profile, values: dict[str, Any]) -> CustomTerritory:
        try:
            values = dict(values)
            _check_fields(values, CUSTOM_TERRITORY_FIELDS)
            _trimmed_name(values, "territory_name", "Territory name")
            if "territory_name" not in values:
                raise ValueError("Territory name is required")
            territory = CustomTerritory(user_id=user.id, **values)
            self.session.add(territory)
            self.session.commit()
            logger.info("profile %s created custom territory %s", user.id, territory.id)
            return territory
        except Exception:
            self.session.rollback()
            raise

    def update_custom_territory(
        self, user: Profile, custom_territory_id: int, changes: dict[str, Any]
    ) -> CustomTerritory:
        try:
            territory = get_or_404(
                self.session, CustomTerritory, custom_territory_id, "Custom territory"
            )
            _ensure_owner(territory, user)
            changes = dict(changes)
            _check_fields(changes, CUSTOM_TERRITORY_FIELDS)
            _trimmed_name(changes, "territory_name", "Territory name")
            for field, value in changes.items():
                setattr(territory, field, value)
            self.session.commit()
            return territory
        except Exception:
            self.session.rollback()
            raise

    def delete_custom_territory(self, user: Profile, custom_territory_id: int) -> None:
        """Delete a custom territory; copies already in play keep their name."""
        try:
            territory = get_or_404(
                self.session, CustomTerritory, custom_territory_id, "Custom territory"
            )
            _ensure_owner(territory, user)
            self.session.delete(territory)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def list_custom_territories(self, user: Profile) -> list[CustomTerritory]:
        stmt = (
            select(CustomTerritory)
            .where(CustomTerritory.user_id == user.id)
            .order_by(CustomTerritory.territory_name)
        )
        return list(self.session.execute(stmt).scalars())

    # Catalog

    def list_gang_types(self) -> list[GangType]:
        return list(self.session.execute(select(GangType).order_by(GangType.gang_type)).scalars())

    def list_fighter_types(self, gang_type_id: int) -> list[dict[str, Any]]:
        """Fighter types available to a gang type, with the cost that gang pays."""
        get_or_404(self.session, GangType, gang_type_id, "Gang type")
        stmt = (
            select(FighterType)
            .where(or_(FighterType.gang_type_id == gang_type_id, FighterType.gang_type_id.is_(None)))
            .order_by(FighterType.cost, FighterType.fighter_type)
        )
        return [
            {
                "id": fighter_type.id,
                "fighter_type": fighter_type.fighter_type,
                "fighter_class": fighter_type.fighter_class,
                "cost": fighter_type.cost,
                "adjusted_cost": costs.fighter_type_adjusted_cost(fighter_type, gang_type_id),
                "free_skill": fighter_type.free_skill,
                "special_rules": fighter_type.special_rules or [],
                "characteristics": {stat: getattr(fighter_type, stat) for stat in STAT_NAMES},
            }
            for fighter_type in self.session.execute(stmt).scalars()
        ]

    def list_equipment(
        self,
        gang_type_id: int | None = None,
        fighter_type_id: int | None = None,
        equipment_type: str | None = None,
    ) -> list[dict[str, Any]]:
        stmt = select(Equipment).order_by(Equipment.equipment_category, Equipment.equipment_name)
        if equipment_type is not None:
            stmt = stmt.where(Equipment.equipment_type == EquipmentType(equipment_type))
        return [
            {
                "id": equipment.id,
                "equipment_name": equipment.equipment_name,
                "equipment_type": equipment.equipment_type,
                "equipment_category": equipment.equipment_category,
                "cost": equipment.cost,
                "adjusted_cost": costs.equipment_adjusted_cost(
                    equipment, gang_type_id, fighter_type_id
                ),
                "weapon_profiles": [
                    profile_fields(profile) for profile in equipment.weapon_profiles
                ],
            }
            for equipment in self.session.execute(stmt).scalars()
        ]

    def list_vehicle_types(self, gang_type_id: int | None = None) -> list[VehicleType]:
        stmt = select(VehicleType).order_by(VehicleType.cost)
        if gang_type_id is not None:
            stmt = stmt.where(
                or_(VehicleType.gang_type_id == gang_type_id, VehicleType.gang_type_id.is_(None))
            )
        return list(self.session.execute(stmt).scalars())

    def list_skills(self) -> list[Skill]:
        stmt = select(Skill).order_by(Skill.skill_type, Skill.name)
        return list(self.session.execute(stmt).scalars())

    def list_injury_types(self) -> list[FighterEffectType]:
        return effect_types_in_category(self.session, EffectCategory.INJURIES)

    def list_characteristic_types(self) -> list[FighterEffectType]:
        return effect_types_in_category(self.session, EffectCategory.ADVANCEMENTS)

    def list_vehicle_damage_types(self) -> list[FighterEffectType]:
        return effect_types_in_category(self.session, EffectCategory.VEHICLE_DAMAGE)

    def list_equipment_upgrades(self, equipment_id: int) -> list[FighterEffectType]:
        return [
            effect_type
            for effect_type in effect_types_in_category(self.session, EffectCategory.EQUIPMENT)
            if effect_type.equipment_id in (None, equipment_id)
        ]
