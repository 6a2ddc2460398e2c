"""Service Factory for Munda Manager.

Factory functions that wire each service to its collaborators. Use these in
production code; in tests, construct services directly and pass fakes that
satisfy the Protocols in ``munda.interfaces``.

Example:
    # Production usage
    from munda.factory import create_fighter_service
    fighters = create_fighter_service(session)

    # Testing usage
    from munda.services.fighter_service import FighterService

    class FakeLogs:
        def create(self, gang_id, user_id, action_type, description, **kwargs):
            return None

    fighters = FighterService(session, financials, FakeLogs(), beasts)
"""

from sqlalchemy.orm import Session

from munda.config import get_settings
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


def create_financials_service(session: Session) -> FinancialsService:
    return FinancialsService(session)


def create_gang_log_service(session: Session) -> GangLogService:
    return GangLogService(session)


def create_beast_service(session: Session) -> BeastService:
    return BeastService(session)


def create_gang_service(session: Session) -> GangService:
    """Create a GangService with all dependencies.

    Args:
        session: Database session

    Returns:
        GangService using the configured starting credits
    """
    return GangService(
        session,
        create_financials_service(session),
        create_gang_log_service(session),
        starting_credits=get_settings().starting_credits,
    )


def create_fighter_service(session: Session) -> FighterService:
    """Create a FighterService with financials, log and beast dependencies."""
    return FighterService(
        session,
        create_financials_service(session),
        create_gang_log_service(session),
        create_beast_service(session),
    )


def create_equipment_service(session: Session) -> EquipmentService:
    """Create an EquipmentService with financials, log and beast dependencies."""
    return EquipmentService(
        session,
        create_financials_service(session),
        create_gang_log_service(session),
        create_beast_service(session),
    )


def create_advancement_service(session: Session) -> AdvancementService:
    return AdvancementService(
        session, create_financials_service(session), create_gang_log_service(session)
    )


def create_injury_service(session: Session) -> InjuryService:
    return InjuryService(
        session, create_financials_service(session), create_gang_log_service(session)
    )


def create_vehicle_service(session: Session) -> VehicleService:
    return VehicleService(
        session, create_financials_service(session), create_gang_log_service(session)
    )


def create_campaign_service(session: Session) -> CampaignService:
    return CampaignService(session, create_gang_log_service(session))


def create_catalog_service(session: Session) -> CatalogService:
    return CatalogService(session)


def create_profile_service(session: Session) -> ProfileService:
    return ProfileService(session)
