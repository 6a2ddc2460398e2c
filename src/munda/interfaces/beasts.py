"""Exotic Beast Service Protocol Interface."""

from typing import Protocol

from munda.models import Fighter, FighterEquipment


class IBeastService(Protocol):
    """Protocol for creating and removing equipment-granted beasts."""

    def create_beasts_for_equipment(
        self, owner: Fighter, fighter_equipment: FighterEquipment
    ) -> list[dict]:
        """Create granted beasts.

        Returns:
            List of ``{"beast": Fighter, "cost": int}``
        """
        ...

    def delete_beasts_for_equipment(self, fighter_equipment: FighterEquipment) -> list[dict]:
        """Delete beasts granted by an equipment row.

        Returns:
            List of ``{"beast_id": int, "cost": int}``
        """
        ...

    def delete_beasts_for_owner(self, owner: Fighter) -> list[dict]:
        """Delete every beast owned by a fighter."""
        ...
