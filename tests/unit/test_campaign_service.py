"""Unit tests for campaigns, their gangs, territories, resources and battles."""

import pytest

from munda.domain.enums import CampaignGangStatus, CampaignRole, GangLogAction
from munda.factory import (
    create_campaign_service,
    create_catalog_service,
    create_gang_log_service,
    create_gang_service,
)
from munda.models import CampaignType, Territory
from munda.services.profile_service import ProfileService


@pytest.fixture
def campaigns(session):
    return create_campaign_service(session)


@pytest.fixture
def campaign(campaigns, user, find):
    dominion = find(CampaignType, campaign_type_name="Dominion")
    return campaigns.create_campaign(user, "Underhive Wars", dominion.id, description="Turf")


@pytest.fixture
def rival_gang(session, other_user, goliath):
    return create_gang_service(session).create_gang(other_user, "Rivals", goliath.id)


@pytest.fixture
def entered(campaigns, user, other_user, campaign, gang, rival_gang):
    """Both gangs accepted into the campaign."""
    campaigns.add_gang(user, campaign.id, gang.id)
    invite = campaigns.add_gang(user, campaign.id, rival_gang.id)
    campaigns.accept_invite(other_user, invite.id)
    return campaign


@pytest.fixture
def territory(campaigns, user, campaign, find):
    old_ruins = find(Territory, territory_name="Old Ruins")
    return campaigns.add_territory(user, campaign.id, territory_id=old_ruins.id)


def _member(campaign, profile):
    return next(member for member in campaign.members if member.user_id == profile.id)


class TestCampaigns:
    def test_creator_is_owner(self, campaign, user):
        assert campaign.status == "Active"
        assert campaign.campaign_type.campaign_type_name == "Dominion"
        owner = _member(campaign, user)
        assert owner.role == CampaignRole.OWNER
        assert owner.joined_at is not None

    def test_name_required(self, campaigns, user):
        with pytest.raises(ValueError, match="Campaign name is required"):
            campaigns.create_campaign(user, " ")

    def test_list_only_member_campaigns(self, campaigns, user, other_user, campaign):
        assert [c.id for c in campaigns.list_campaigns(user)] == [campaign.id]
        assert campaigns.list_campaigns(other_user) == []

    def test_update_settings(self, campaigns, user, campaign):
        updated = campaigns.update_campaign_settings(
            user, campaign.id, {"has_meat": True, "status": "Finished"}
        )
        assert updated.has_meat is True
        assert updated.status == "Finished"

    def test_update_rejects_unknown_fields(self, campaigns, user, campaign):
        with pytest.raises(ValueError, match="Field 'campaign_type_id' cannot be updated"):
            campaigns.update_campaign_settings(user, campaign.id, {"campaign_type_id": 2})

    def test_outsiders_cannot_update(self, campaigns, other_user, campaign):
        with pytest.raises(PermissionError):
            campaigns.update_campaign_settings(other_user, campaign.id, {"note": "hi"})

    def test_only_owner_deletes(self, campaigns, user, other_user, campaign):
        campaigns.add_member(user, campaign.id, other_user.id, CampaignRole.ARBITRATOR)
        with pytest.raises(PermissionError, match="Only the campaign owner"):
            campaigns.delete_campaign(other_user, campaign.id)

        campaigns.delete_campaign(user, campaign.id)
        with pytest.raises(LookupError, match="Campaign not found"):
            campaigns.get_campaign(campaign.id)


class TestMembers:
    def test_add_member(self, campaigns, user, other_user, campaign):
        member = campaigns.add_member(user, campaign.id, other_user.id)
        assert member.role == CampaignRole.MEMBER
        assert member.invited_by == user.id

        with pytest.raises(ValueError, match="already a member"):
            campaigns.add_member(user, campaign.id, other_user.id)

    def test_members_cannot_invite(self, campaigns, user, other_user, admin, campaign):
        campaigns.add_member(user, campaign.id, other_user.id)
        with pytest.raises(PermissionError):
            campaigns.add_member(other_user, campaign.id, admin.id)

    def test_last_owner_stays(self, campaigns, user, campaign):
        owner = _member(campaign, user)
        with pytest.raises(ValueError, match="Cannot remove the last owner"):
            campaigns.remove_member(user, campaign.id, owner.id)
        with pytest.raises(ValueError, match="at least one owner"):
            campaigns.update_member_role(user, campaign.id, owner.id, CampaignRole.MEMBER)

    def test_hand_over_ownership(self, campaigns, user, other_user, campaign):
        member = campaigns.add_member(user, campaign.id, other_user.id)
        campaigns.update_member_role(user, campaign.id, member.id, CampaignRole.OWNER)
        demoted = campaigns.update_member_role(
            other_user, campaign.id, _member(campaign, user).id, CampaignRole.MEMBER
        )
        assert demoted.role == CampaignRole.MEMBER

    def test_leaving_removes_gangs(self, campaigns, other_user, entered, gang):
        member = _member(entered, other_user)
        campaigns.remove_member(other_user, entered.id, member.id)

        campaign = campaigns.get_campaign(entered.id)
        assert [cg.gang_id for cg in campaign.gangs] == [gang.id]
        assert other_user.id not in [m.user_id for m in campaign.members]


class TestGangs:
    def test_own_gang_is_accepted(self, campaigns, user, campaign, gang):
        campaign_gang = campaigns.add_gang(user, campaign.id, gang.id)
        assert campaign_gang.status == CampaignGangStatus.ACCEPTED
        assert campaign_gang.joined_at is not None

    def test_invited_gang_is_pending(self, campaigns, user, other_user, campaign, rival_gang):
        invite = campaigns.add_gang(user, campaign.id, rival_gang.id)
        assert invite.status == CampaignGangStatus.PENDING
        assert _member(campaign, other_user).role == CampaignRole.MEMBER

        with pytest.raises(PermissionError, match="Only the gang owner"):
            campaigns.accept_invite(user, invite.id)

        accepted = campaigns.accept_invite(other_user, invite.id)
        assert accepted.status == CampaignGangStatus.ACCEPTED

        with pytest.raises(ValueError, match="already been accepted"):
            campaigns.accept_invite(other_user, invite.id)

    def test_decline_invite(self, campaigns, user, other_user, campaign, rival_gang):
        invite = campaigns.add_gang(user, campaign.id, rival_gang.id)
        campaigns.decline_invite(other_user, invite.id)
        assert campaigns.get_campaign(campaign.id).gangs == []

    def test_gang_in_one_campaign_only(self, campaigns, user, campaign, gang):
        campaigns.add_gang(user, campaign.id, gang.id)
        second = campaigns.create_campaign(user, "Another")
        with pytest.raises(ValueError, match="already part of a campaign"):
            campaigns.add_gang(user, second.id, gang.id)

    def test_outsider_cannot_add_gang(self, campaigns, other_user, campaign, rival_gang):
        with pytest.raises(PermissionError):
            campaigns.add_gang(other_user, campaign.id, rival_gang.id)

    def test_remove_gang_releases_territory(
        self, campaigns, user, entered, territory, rival_gang
    ):
        campaigns.assign_territory(user, entered.id, territory.id, rival_gang.id)
        campaigns.remove_gang(user, entered.id, rival_gang.id)

        campaign = campaigns.get_campaign(entered.id)
        assert campaign.territories[0].gang_id is None
        assert rival_gang.id not in [cg.gang_id for cg in campaign.gangs]


class TestTerritories:
    def test_catalog_territory(self, territory):
        assert territory.territory_name == "Old Ruins"
        assert territory.gang_id is None

    def test_custom_territory(self, campaigns, user, campaign):
        territory = campaigns.add_territory(user, campaign.id, territory_name=" Sump Lake ")
        assert territory.territory_name == "Sump Lake"
        assert territory.territory_id is None

    def test_user_defined_territory(self, session, campaigns, user, campaign):
        custom = create_catalog_service(session).create_custom_territory(
            user, {"territory_name": "Sump Lake"}
        )
        territory = campaigns.add_territory(user, campaign.id, custom_territory_id=custom.id)
        assert territory.territory_name == "Sump Lake"
        assert territory.custom_territory_id == custom.id

        create_catalog_service(session).delete_custom_territory(user, custom.id)
        session.refresh(territory)
        assert territory.custom_territory_id is None
        assert territory.territory_name == "Sump Lake"

    def test_other_users_custom_territory(self, session, campaigns, user, other_user, campaign):
        custom = create_catalog_service(session).create_custom_territory(
            other_user, {"territory_name": "Sump Lake"}
        )
        with pytest.raises(PermissionError, match="use this custom territory"):
            campaigns.add_territory(user, campaign.id, custom_territory_id=custom.id)

    def test_territory_name_or_id_required(self, campaigns, user, campaign):
        with pytest.raises(ValueError, match="Either territory_id or territory_name"):
            campaigns.add_territory(user, campaign.id)

    def test_assign_requires_campaign_gang(self, campaigns, user, campaign, territory, gang):
        with pytest.raises(ValueError, match="Gang is not part of this campaign"):
            campaigns.assign_territory(user, campaign.id, territory.id, gang.id)

    def test_assign_and_release(self, campaigns, user, entered, territory, gang):
        assert campaigns.assign_territory(user, entered.id, territory.id, gang.id).gang_id == gang.id
        assert campaigns.release_territory(user, entered.id, territory.id).gang_id is None

    def test_status(self, campaigns, user, campaign, territory):
        updated = campaigns.update_territory_status(
            user, campaign.id, territory.id, ruined=True, default_gang_territory=True
        )
        assert updated.ruined is True
        assert updated.default_gang_territory is True

    def test_remove(self, campaigns, user, campaign, territory):
        campaigns.remove_territory(user, campaign.id, territory.id)
        with pytest.raises(LookupError, match="Territory not found"):
            campaigns.release_territory(user, campaign.id, territory.id)


class TestResources:
    @pytest.fixture
    def meat(self, campaigns, user, campaign):
        return campaigns.create_resource(user, campaign.id, "Meat")

    def test_duplicate_names(self, campaigns, user, campaign, meat):
        with pytest.raises(ValueError, match="Resource 'meat' already exists"):
            campaigns.create_resource(user, campaign.id, "meat")

    def test_name_required(self, campaigns, user, campaign):
        with pytest.raises(ValueError, match="Resource name is required"):
            campaigns.create_resource(user, campaign.id, "  ")

    def test_members_cannot_create(self, campaigns, user, other_user, campaign):
        campaigns.add_member(user, campaign.id, other_user.id)
        with pytest.raises(PermissionError, match="Only campaign owners and arbitrators"):
            campaigns.create_resource(other_user, campaign.id, "Ash")

    def test_rename_and_delete(self, campaigns, user, campaign, meat):
        assert campaigns.update_resource(user, meat.id, "Grub").resource_name == "Grub"
        campaigns.delete_resource(user, meat.id)
        assert campaigns.get_campaign(campaign.id).resources == []

    def test_gang_owner_adjusts_stock(self, campaigns, user, other_user, entered, rival_gang, meat):
        campaign_gang = next(cg for cg in entered.gangs if cg.gang_id == rival_gang.id)
        holding = campaigns.update_gang_resource(other_user, campaign_gang.id, meat.id, 3)
        assert holding.quantity == 3

        with pytest.raises(ValueError, match="Resource quantity cannot be negative"):
            campaigns.update_gang_resource(other_user, campaign_gang.id, meat.id, -5)
        assert campaigns.update_gang_resource(user, campaign_gang.id, meat.id, -3).quantity == 0


class TestBattles:
    def test_claims_go_to_winner(self, session, campaigns, user, entered, territory, gang, rival_gang):
        battle = campaigns.create_battle_log(
            user,
            entered.id,
            "Turf War",
            attacker_id=gang.id,
            defender_id=rival_gang.id,
            winner_id=gang.id,
            participants=[{"gang_id": gang.id, "role": "attacker"}],
            claimed_territories=[territory.id],
        )
        assert battle.scenario == "Turf War"
        assert campaigns.get_campaign(entered.id).territories[0].gang_id == gang.id

        logs = create_gang_log_service(session)
        winner_log = logs.list_logs(gang.id, limit=1)[0]
        loser_log = logs.list_logs(rival_gang.id, limit=1)[0]
        assert winner_log.action_type == GangLogAction.BATTLE_RESULT
        assert winner_log.description == "Battle 'Turf War': won"
        assert loser_log.description == "Battle 'Turf War': lost"

    def test_claims_need_a_winner(self, campaigns, user, entered, territory, gang):
        with pytest.raises(ValueError, match="A winner is required"):
            campaigns.create_battle_log(
                user, entered.id, "Ambush", attacker_id=gang.id, claimed_territories=[territory.id]
            )

    def test_outside_gang_rejected(self, session, campaigns, user, campaign, goliath):
        stranger = create_gang_service(session).create_gang(user, "Strangers", goliath.id)
        with pytest.raises(ValueError, match="Gang is not part of this campaign"):
            campaigns.create_battle_log(user, campaign.id, "Ambush", attacker_id=stranger.id)

    def test_only_members_log(self, session, campaigns, campaign):
        outsider = ProfileService(session).create_profile("outsider")
        with pytest.raises(PermissionError, match="Only campaign members"):
            campaigns.create_battle_log(outsider, campaign.id, "Ambush")

    def test_update_and_delete(self, campaigns, user, entered, gang):
        battle = campaigns.create_battle_log(user, entered.id, "Ambush")
        updated = campaigns.update_battle_log(user, battle.id, {"winner_id": gang.id, "note": "close"})
        assert updated.winner_id == gang.id

        with pytest.raises(ValueError, match="Field 'scenario_id' cannot be updated"):
            campaigns.update_battle_log(user, battle.id, {"scenario_id": 3})

        campaigns.delete_battle_log(user, battle.id)
        assert campaigns.get_campaign(entered.id).battles == []


def test_export(campaigns, user, entered, territory, gang):
    meat = campaigns.create_resource(user, entered.id, "Meat")
    campaign_gang = next(cg for cg in entered.gangs if cg.gang_id == gang.id)
    campaigns.update_gang_resource(user, campaign_gang.id, meat.id, 2)
    campaigns.create_battle_log(user, entered.id, "Ambush", winner_id=gang.id)

    exported = campaigns.export_campaign(entered.id)
    assert exported["campaign_name"] == "Underhive Wars"
    assert exported["campaign_type"] == "Dominion"
    assert {member["username"] for member in exported["members"]} == {"scummer", "rival"}
    gangs = {entry["gang_name"]: entry for entry in exported["gangs"]}
    assert gangs["Iron Fists"]["resources"] == {"Meat": 2}
    assert gangs["Rivals"]["status"] == CampaignGangStatus.ACCEPTED
    assert exported["territories"][0]["territory_name"] == "Old Ruins"
    assert exported["resources"] == ["Meat"]
    assert exported["battles"][0]["winner_id"] == gang.id
