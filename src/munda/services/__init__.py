"""Service layer for Munda Manager.

Services own one transaction per public method: they commit on success and
roll back and re-raise on any failure. Operational services depend on the
Protocol interfaces in ``munda.interfaces`` for financials, gang logs and
exotic beasts:

- AdvancementService: XP spending on characteristics and skills
- CampaignService: Campaigns, members, territories, resources, battles
- CatalogService: Catalog reads and user-defined custom content
- EquipmentService: Buying, selling, deleting and stashing equipment
- FighterService: Hiring, status changes, XP, details and copies
- GangService: Gang lifecycle, balances, ordering and copies
- InjuryService: Lasting injuries and seeded injury rolls
- ProfileService: User profiles behind the X-User-Id header
- VehicleService: Vehicles, crews and vehicle damage

Production Usage:
    from munda.factory import create_equipment_service
    equipment = create_equipment_service(session)
    result = equipment.buy_equipment(user, gang_id, fighter_id=fighter_id, equipment_id=3)

Testing Usage:
    from munda.services.equipment_service import EquipmentService

    class FakeBeasts:
        def create_beasts_for_equipment(self, owner, fighter_equipment):
            return []

    service = EquipmentService(session, financials, logs, FakeBeasts())
"""

from munda.services.advancement_service import AdvancementService
from munda.services.beast_service import BeastService
from munda.services.campaign_service import CampaignService
from munda.services.catalog_service import CatalogService
from munda.services.equipment_service import EquipmentService
from munda.services.fighter_service import FighterService
from munda.services.financials_service import FinancialsService
from munda.services.gang_log_service import GangLogService
from munda.services.gang_service import GangService
from munda.services.injury_service import InjuryService
from munda.services.profile_service import ProfileService
from munda.services.vehicle_service import VehicleService

__all__ = [
    "AdvancementService",
    "BeastService",
    "CampaignService",
    "CatalogService",
    "EquipmentService",
    "FighterService",
    "FinancialsService",
    "GangLogService",
    "GangService",
    "InjuryService",
    "ProfileService",
    "VehicleService",
]
