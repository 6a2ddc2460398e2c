"""Exotic beasts granted by equipment.

Buying certain equipment (a Cyber-mastiff, say) grants one beast per
``exotic_beast_grants`` row. The beast is a fighter in the same gang linked
to its owner and to the granting equipment row; its cost rolls into the
owner's total cost.
"""

import logging

from sqlalchemy.orm import Session

from munda.domain import costs
from munda.domain.effects import STAT_NAMES
from munda.domain.rules_config import DEFAULT_RULES
from munda.models import Fighter, FighterEquipment, FighterExoticBeast, FighterType
from munda.services.access import next_position

logger = logging.getLogger(__name__)

class BeastService:
    """Creates and removes beasts inside the caller's transaction."""

    def __init__(self, session: Session):
        self.session = session

    def _create_beast(
        self, owner: Fighter, beast_type: FighterType, fighter_equipment: FighterEquipment
    ) -> Fighter:
        beast = Fighter(
            gang_id=owner.gang_id,
            user_id=owner.user_id,
            fighter_name=beast_type.fighter_type,
            fighter_type=beast_type.fighter_type,
            fighter_type_id=beast_type.id,
            fighter_class=DEFAULT_RULES.fighters.exotic_beast_class,
            credits=0,
            special_rules=list(beast_type.special_rules or []),
            free_skill=False,
            position=next_position(self.session, owner.gang_id),
            **{stat: getattr(beast_type, stat) for stat in STAT_NAMES},
        )
        self.session.add(beast)
        self.session.flush()

        for default in beast_type.defaults:
            if default.equipment is None:
                continue
            self.session.add(
                FighterEquipment(
                    gang_id=owner.gang_id,
                    fighter=beast,
                    equipment_id=default.equipment.id,
                    purchase_cost=0,
                    original_cost=default.equipment.cost,
                    user_id=owner.user_id,
                )
            )

        link = FighterExoticBeast(owner=owner, pet=beast, fighter_equipment=fighter_equipment)
        self.session.add(link)
        self.session.flush()
        return beast

    def create_beasts_for_equipment(
        self, owner: Fighter, fighter_equipment: FighterEquipment
    ) -> list[dict]:
        """Create the beasts granted by an equipment row held by ``owner``.

        Args:
            owner: Fighter that will own the beasts
            fighter_equipment: The granting equipment row

        Returns:
            List of ``{"beast": Fighter, "cost": int}`` for each created beast
        """
        equipment = fighter_equipment.equipment
        if equipment is None:
            return []

        created = []
        for grant in equipment.beast_grants:
            beast = self._create_beast(owner, grant.fighter_type, fighter_equipment)
            created.append({"beast": beast, "cost": costs.fighter_own_cost(beast)})
            logger.info(
                "created beast %s (%s) for fighter %s", beast.id, beast.fighter_type, owner.id
            )
        return created

    def _delete_beasts(self, beasts: list[Fighter]) -> list[dict]:
        removed = []
        for beast in beasts:
            removed.append({"beast_id": beast.id, "cost": costs.fighter_own_cost(beast)})
            link = beast.beast_ownership
            if link is not None:
                # Drop the link from loaded parent collections so it is deleted once
                if link.fighter_equipment is not None:
                    link.fighter_equipment.beast_links.remove(link)
                link.owner.owned_beasts.remove(link)
            self.session.delete(beast)
        if removed:
            self.session.flush()
        return removed

    def delete_beasts_for_equipment(self, fighter_equipment: FighterEquipment) -> list[dict]:
        """Delete the beasts granted by an equipment row.

        Returns:
            List of ``{"beast_id": int, "cost": int}`` with each removed beast's own cost
        """
        beasts = [link.pet for link in fighter_equipment.beast_links if link.pet is not None]
        return self._delete_beasts(beasts)

    def delete_beasts_for_owner(self, owner: Fighter) -> list[dict]:
        return self._delete_beasts(costs.owned_beasts(owner))
