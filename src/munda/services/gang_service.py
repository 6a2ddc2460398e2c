"""Gang Service for Munda Manager.

Creating, editing, reordering, copying and deleting gangs. Manual credit
edits go through the financials helper so wealth stays in step.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from munda.domain.enums import BalanceOperation, GangLogAction
from munda.domain.rules_config import DEFAULT_RULES
from munda.interfaces import IFinancialsService, IGangLogService
from munda.models import (
    Fighter,
    FighterEquipment,
    FighterExoticBeast,
    FighterSkill,
    Gang,
    GangType,
    Profile,
    Vehicle,
)
from munda.models.gang import ALIGNMENTS
from munda.services.access import get_or_404, load_gang, refresh
from munda.services.cloning import clone_effect, column_values
from munda.services.gang_log_service import (
    credits_changed_description,
    reputation_changed_description,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "note",
        "alignment",
        "gang_colour",
        "alliance_id",
        "meat",
        "scavenging_rolls",
        "exploration_points",
        "gang_variants",
        "credits",
        "credits_operation",
        "reputation",
        "reputation_operation",
    }
)

_COUNTERS = ("meat", "scavenging_rolls", "exploration_points")


def _apply_balance(current: int, amount: int, operation: str | None) -> int:
    if amount < 0:
        raise ValueError("Amount must be non-negative")
    if operation is None:
        raise ValueError("An operation ('add' or 'subtract') is required")
    if BalanceOperation(operation) == BalanceOperation.ADD:
        return current + amount
    return current - amount


def _validate_alignment(alignment: str) -> str:
    if alignment not in ALIGNMENTS:
        raise ValueError(f"Alignment must be one of: {', '.join(ALIGNMENTS)}")
    return alignment


class GangService:
    """Service for gang-level operations."""

    def __init__(
        self,
        session: Session,
        financials: IFinancialsService,
        logs: IGangLogService,
        starting_credits: int = DEFAULT_RULES.economy.starting_credits,
    ):
        self.session = session
        self.financials = financials
        self.logs = logs
        self.starting_credits = starting_credits

    def create_gang(
        self,
        user: Profile,
        name: str,
        gang_type_id: int,
        alignment: str | None = None,
        gang_colour: str | None = None,
    ) -> Gang:
        """Create a new gang with starting credits.

        Args:
            user: Owner of the new gang
            name: Gang name (trailing whitespace is dropped)
            gang_type_id: Catalog gang type
            alignment: Defaults to the gang type's alignment
            gang_colour: Optional display colour

        Returns:
            The created Gang

        Raises:
            ValueError: If the name is blank or the alignment is invalid
            LookupError: If the gang type does not exist
        """
        try:
            name = (name or "").rstrip()
            if not name.strip():
                raise ValueError("Gang name is required")

            gang_type = get_or_404(self.session, GangType, gang_type_id, "Gang type")
            alignment = _validate_alignment(alignment or gang_type.alignment)

            gang = Gang(
                user_id=user.id,
                name=name,
                gang_type_id=gang_type.id,
                gang_type=gang_type.gang_type,
                alignment=alignment,
                credits=self.starting_credits,
                reputation=DEFAULT_RULES.economy.starting_reputation,
                rating=0,
                wealth=self.starting_credits,
                gang_colour=gang_colour,
            )
            self.session.add(gang)
            self.session.flush()

            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.GANG_CREATED,
                f'Created gang "{name}" ({gang_type.gang_type})',
            )
            self.session.commit()
            logger.info("user %s created gang %s (%s)", user.id, gang.id, name)
            return gang
        except Exception:
            self.session.rollback()
            raise

    def get_gang(self, gang_id: int) -> Gang:
        return get_or_404(self.session, Gang, gang_id, "Gang")

    def list_gangs(self, user: Profile) -> list[Gang]:
        stmt = select(Gang).where(Gang.user_id == user.id).order_by(Gang.id)
        return list(self.session.execute(stmt).scalars())

    def update_gang(self, user: Profile, gang_id: int, changes: dict[str, Any]) -> Gang:
        """Apply a partial update to a gang.

        ``credits`` and ``reputation`` are amounts applied with
        ``credits_operation`` / ``reputation_operation`` ("add" or "subtract").

        Raises:
            ValueError: On unknown fields, invalid alignment, negative counters
                or credits dropping below zero
        """
        try:
            unknown = set(changes) - UPDATABLE_FIELDS
            if unknown:
                raise ValueError(f"Unknown gang fields: {', '.join(sorted(unknown))}")

            gang = load_gang(self.session, gang_id, user, for_update=True)

            if "name" in changes:
                name = (changes["name"] or "").rstrip()
                if not name.strip():
                    raise ValueError("Gang name is required")
                gang.name = name

            if changes.get("alignment") is not None:
                alignment = _validate_alignment(changes["alignment"])
                if alignment != gang.alignment:
                    self.logs.create(
                        gang.id,
                        user.id,
                        GangLogAction.ALIGNMENT_CHANGED,
                        f"Alignment changed from {gang.alignment} to {alignment}",
                    )
                    gang.alignment = alignment

            for field in ("note", "gang_colour", "alliance_id", "gang_variants"):
                if field in changes:
                    setattr(gang, field, changes[field])

            for field in _COUNTERS:
                if changes.get(field) is not None:
                    if changes[field] < 0:
                        raise ValueError(f"{field.replace('_', ' ').capitalize()} cannot be negative")
                    setattr(gang, field, changes[field])

            if changes.get("credits") is not None:
                old_credits = gang.credits
                new_credits = _apply_balance(
                    old_credits, changes["credits"], changes.get("credits_operation")
                )
                if new_credits < 0:
                    raise ValueError("Credits cannot be negative")
                if new_credits != old_credits:
                    self.financials.update_gang_financials(
                        gang.id, credits_delta=new_credits - old_credits
                    )
                    self.logs.create(
                        gang.id,
                        user.id,
                        GangLogAction.CREDITS_CHANGED,
                        credits_changed_description(old_credits, new_credits),
                    )

            if changes.get("reputation") is not None:
                old_reputation = gang.reputation
                new_reputation = _apply_balance(
                    old_reputation, changes["reputation"], changes.get("reputation_operation")
                )
                if new_reputation != old_reputation:
                    gang.reputation = new_reputation
                    self.logs.create(
                        gang.id,
                        user.id,
                        GangLogAction.REPUTATION_CHANGED,
                        reputation_changed_description(old_reputation, new_reputation),
                    )

            self.session.commit()
            return gang
        except Exception:
            self.session.rollback()
            raise

    def delete_gang(self, user: Profile, gang_id: int) -> None:
        """Delete a gang and everything it owns, releasing held territories."""
        try:
            gang = load_gang(self.session, gang_id, user)
            for territory in list(gang.held_territories):
                territory.gang = None
            self.session.delete(gang)
            self.session.commit()
            logger.info("user %s deleted gang %s", user.id, gang_id)
        except Exception:
            self.session.rollback()
            raise

    def update_positions(
        self, user: Profile, gang_id: int, positions: dict[int, int]
    ) -> list[Fighter]:
        """Reorder fighters.

        Args:
            user: Acting user
            gang_id: Gang whose fighters are reordered
            positions: Mapping of position to fighter id

        Returns:
            The gang's fighters in their new order
        """
        try:
            gang = load_gang(self.session, gang_id, user)
            fighters = {fighter.id: fighter for fighter in gang.fighters}
            for position, fighter_id in positions.items():
                fighter = fighters.get(fighter_id)
                if fighter is None:
                    raise ValueError(f"Fighter {fighter_id} does not belong to this gang")
                fighter.position = int(position)
            self.session.commit()
            return sorted(fighters.values(), key=lambda f: (f.position, f.id))
        except Exception:
            self.session.rollback()
            raise

    def copy_gang(self, user: Profile, gang_id: int, new_name: str | None = None) -> Gang:
        """Clone a gang with its fighters, stash, vehicles and beasts.

        The copy belongs to the caller. Rating and wealth are recomputed
        from the cloned rows.
        """
        try:
            source = load_gang(self.session, gang_id, user)
            name = (new_name or "").rstrip() or f"{source.name}{DEFAULT_RULES.fighters.copy_suffix}"

            gang = Gang(
                **column_values(source, exclude=("user_id", "name", "rating", "wealth")),
                user_id=user.id,
                name=name,
                rating=0,
                wealth=0,
            )
            self.session.add(gang)
            self.session.flush()

            fighter_map: dict[int, Fighter] = {}
            for fighter in source.fighters:
                clone = Fighter(
                    **column_values(fighter, exclude=("gang_id", "user_id")),
                    gang_id=gang.id,
                    user_id=user.id,
                )
                self.session.add(clone)
                fighter_map[fighter.id] = clone

            vehicle_map: dict[int, Vehicle] = {}
            for vehicle in source.vehicles:
                clone = Vehicle(
                    **column_values(vehicle, exclude=("gang_id", "fighter_id")),
                    gang_id=gang.id,
                    fighter=fighter_map.get(vehicle.fighter_id),
                )
                self.session.add(clone)
                vehicle_map[vehicle.id] = clone
            self.session.flush()

            equipment_map: dict[int, FighterEquipment] = {}
            for item in source.equipment:
                clone = FighterEquipment(
                    **column_values(
                        item, exclude=("gang_id", "fighter_id", "vehicle_id", "user_id")
                    ),
                    gang_id=gang.id,
                    fighter=fighter_map.get(item.fighter_id),
                    vehicle=vehicle_map.get(item.vehicle_id),
                    user_id=user.id,
                )
                self.session.add(clone)
                equipment_map[item.id] = clone
            self.session.flush()

            effect_map = {}
            for fighter in source.fighters:
                for effect in fighter.effects:
                    clone = clone_effect(
                        effect,
                        fighter=fighter_map[fighter.id],
                        fighter_equipment=equipment_map.get(effect.fighter_equipment_id),
                        user_id=user.id,
                    )
                    self.session.add(clone)
                    effect_map[effect.id] = clone
            for vehicle in source.vehicles:
                for effect in vehicle.effects:
                    clone = clone_effect(
                        effect,
                        vehicle=vehicle_map[vehicle.id],
                        fighter_equipment=equipment_map.get(effect.fighter_equipment_id),
                        user_id=user.id,
                    )
                    fitted = (clone.type_specific_data or {}).get("fighter_equipment_id")
                    if fitted is not None:
                        # Hardpoints point at the copied weapon
                        weapon = equipment_map.get(fitted)
                        clone.type_specific_data = {
                            **clone.type_specific_data,
                            "fighter_equipment_id": weapon.id if weapon is not None else None,
                        }
                    self.session.add(clone)
            self.session.flush()

            for fighter in source.fighters:
                for skill in fighter.skills:
                    linked = effect_map.get(skill.fighter_effect_id)
                    self.session.add(
                        FighterSkill(
                            **column_values(skill, exclude=("fighter_id", "fighter_effect_id")),
                            fighter=fighter_map[fighter.id],
                            fighter_effect_id=linked.id if linked is not None else None,
                        )
                    )
                for link in fighter.owned_beasts:
                    self.session.add(
                        FighterExoticBeast(
                            owner=fighter_map[link.fighter_owner_id],
                            pet=fighter_map[link.fighter_pet_id],
                            fighter_equipment=equipment_map.get(link.fighter_equipment_id),
                        )
                    )

            refresh(self.session)
            self.financials.recalculate(gang.id)
            self.logs.create(
                gang.id,
                user.id,
                GangLogAction.GANG_COPIED,
                f'Copied from gang "{source.name}"',
            )
            self.session.commit()
            logger.info("user %s copied gang %s to %s", user.id, gang_id, gang.id)
            return gang
        except Exception:
            self.session.rollback()
            raise

    def recalculate_gang(self, user: Profile, gang_id: int) -> dict:
        """Rebuild the stored rating and wealth from the gang's current rows."""
        try:
            load_gang(self.session, gang_id, user)
            result = self.financials.recalculate(gang_id)
            if (result["old_rating"], result["old_wealth"]) != (
                result["new_rating"],
                result["new_wealth"],
            ):
                self.logs.create(
                    gang_id,
                    user.id,
                    GangLogAction.RATING_RECALCULATED,
                    f"Rating recalculated from {result['old_rating']} to {result['new_rating']}",
                )
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise
