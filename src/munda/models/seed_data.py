"""Seed data initialization for catalog tables.

This module loads a starter catalog: gang types, fighter types, skills,
equipment, effect types (characteristic advancements, lasting injuries,
vehicle damage, equipment upgrades), vehicle types and campaign types.
Each seed function is a no-op when its table already has rows.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from .catalog import (
    CampaignType,
    Equipment,
    EquipmentDiscount,
    ExoticBeastGrant,
    FighterDefault,
    FighterEffectCategory,
    FighterEffectType,
    FighterEffectTypeModifier,
    FighterType,
    FighterTypeGangCost,
    GangType,
    Skill,
    Territory,
    VehicleType,
    WeaponProfile,
)

EFFECT_CATEGORIES = (
    "injuries",
    "advancements",
    "user",
    "equipment",
    "vehicle_damage",
    "hardpoint",
)

# (effect name, stat name, xp cost, credits increase)
CHARACTERISTIC_ADVANCEMENTS = (
    ("Weapon Skill", "weapon_skill", 6, 10),
    ("Ballistic Skill", "ballistic_skill", 6, 10),
    ("Strength", "strength", 8, 30),
    ("Toughness", "toughness", 8, 30),
    ("Wounds", "wounds", 12, 30),
    ("Initiative", "initiative", 5, 10),
    ("Attacks", "attacks", 12, 30),
    ("Movement", "movement", 3, 10),
    ("Leadership", "leadership", 3, 5),
    ("Cool", "cool", 3, 5),
    ("Willpower", "willpower", 3, 5),
    ("Intelligence", "intelligence", 3, 5),
)

# (effect name, {stat: delta}, extra type_specific_data)
LASTING_INJURIES = (
    ("Lesson Learned", {}, {}),
    ("Impressive Scars", {"cool": -1}, {}),
    ("Horrid Scars", {}, {}),
    ("Bitter Enmity", {}, {}),
    ("Out Cold", {}, {}),
    ("Convalescence", {}, {"recovery": True}),
    ("Old Battle Wound", {}, {"recovery": True}),
    ("Partially Deafened", {}, {"recovery": True}),
    ("Humiliated", {"leadership": 1, "cool": 1}, {"recovery": True}),
    ("Eye Injury", {"ballistic_skill": 1}, {"recovery": True}),
    ("Hand Injury", {"weapon_skill": 1}, {"recovery": True}),
    ("Hobbled", {"movement": -1}, {"recovery": True}),
    ("Spinal Injury", {"strength": -1}, {"recovery": True}),
    ("Enfeebled", {"toughness": -1}, {"recovery": True}),
    ("Head Injury", {"intelligence": 1, "willpower": 1}, {"recovery": True}),
    ("Multiple Injuries", {}, {"recovery": True}),
    ("Captured", {}, {"captured": True}),
    ("Critical Injury", {}, {}),
    ("Memorable Death", {}, {}),
)

VEHICLE_DAMAGES = (
    ("Persistent Rattle", {}),
    ("Handling Glitch", {"handling": 1}),
    ("Unreliable", {}),
    ("Loss of Power", {"movement": -1}),
    ("Damaged Bodywork", {"front": -1}),
    ("Damaged Frame", {"hull_points": -1}),
)


def _is_seeded(session: Session, model: type) -> bool:
    return session.execute(select(model).limit(1)).scalar_one_or_none() is not None


def seed_gang_catalog(session: Session) -> None:
    """Seed gang types, fighter types, skills, equipment and defaults.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if _is_seeded(session, GangType):
        return

    goliath = GangType(gang_type="Goliath", alignment="Law Abiding")
    escher = GangType(gang_type="Escher", alignment="Law Abiding")
    orlock = GangType(gang_type="Orlock", alignment="Law Abiding")
    outcasts = GangType(gang_type="Outcast", alignment="Outlaw")
    session.add_all([goliath, escher, orlock, outcasts])
    session.flush()

    skills = [
        Skill(name="Nerves of Steel", skill_type="Ferocity"),
        Skill(name="Berserker", skill_type="Ferocity"),
        Skill(name="Unstoppable", skill_type="Muscle"),
        Skill(name="Iron Jaw", skill_type="Muscle"),
        Skill(name="Fast Shot", skill_type="Shooting"),
        Skill(name="Overwatch", skill_type="Cunning"),
    ]
    session.add_all(skills)

    stub_gun = Equipment(
        equipment_name="Stub gun", equipment_type="weapon", equipment_category="Pistols", cost=5
    )
    autogun = Equipment(
        equipment_name="Autogun", equipment_type="weapon", equipment_category="Basic Weapons", cost=15
    )
    lasgun = Equipment(
        equipment_name="Lasgun", equipment_type="weapon", equipment_category="Basic Weapons", cost=15
    )
    fighting_knife = Equipment(
        equipment_name="Fighting knife",
        equipment_type="weapon",
        equipment_category="Close Combat Weapons",
        cost=15,
    )
    flak = Equipment(
        equipment_name="Flak armour", equipment_type="wargear", equipment_category="Armour", cost=10
    )
    mesh = Equipment(
        equipment_name="Mesh armour", equipment_type="wargear", equipment_category="Armour", cost=15
    )
    mastiff = Equipment(
        equipment_name="Cyber-mastiff",
        equipment_type="wargear",
        equipment_category="Exotic Beasts",
        cost=100,
    )
    ram = Equipment(
        equipment_name="Ram",
        equipment_type="vehicle_upgrade",
        equipment_category="Body Upgrades",
        cost=25,
    )
    session.add_all([stub_gun, autogun, lasgun, fighting_knife, flak, mesh, mastiff, ram])
    session.flush()

    session.add_all(
        [
            WeaponProfile(
                weapon_id=stub_gun.id, range_short='6"', range_long='12"', acc_short="+1",
                acc_long="-", strength="3", ap="-", damage="1", ammo="4+", traits="Plentiful",
            ),
            WeaponProfile(
                weapon_id=autogun.id, range_short='8"', range_long='24"', acc_short="+1",
                acc_long="-", strength="3", ap="-", damage="1", ammo="4+", traits="Rapid Fire (1)",
            ),
            WeaponProfile(
                weapon_id=lasgun.id, range_short='18"', range_long='24"', acc_short="+1",
                acc_long="-", strength="3", ap="-", damage="1", ammo="2+", traits="Plentiful",
            ),
            WeaponProfile(
                weapon_id=fighting_knife.id, range_short="E", range_long="-", acc_short="-",
                acc_long="-", strength="S", ap="-1", damage="1", ammo="-", traits="Backstab, Melee",
            ),
            EquipmentDiscount(equipment_id=lasgun.id, gang_type_id=escher.id, adjusted_cost=10),
        ]
    )

    forge_tyrant = FighterType(
        fighter_type="Forge Tyrant", gang_type_id=goliath.id, fighter_class="Leader", cost=135,
        movement=4, weapon_skill=3, ballistic_skill=4, strength=4, toughness=4, wounds=2,
        initiative=4, attacks=2, leadership=5, cool=5, willpower=6, intelligence=6,
        special_rules=["Leader", "Gang Fighter (Ganger)"], free_skill=True,
    )
    forge_boss = FighterType(
        fighter_type="Forge Boss", gang_type_id=goliath.id, fighter_class="Champion", cost=95,
        movement=4, weapon_skill=3, ballistic_skill=4, strength=4, toughness=4, wounds=2,
        initiative=4, attacks=2, leadership=6, cool=6, willpower=7, intelligence=7,
        free_skill=True,
    )
    bully = FighterType(
        fighter_type="Bully", gang_type_id=goliath.id, fighter_class="Ganger", cost=60,
        movement=4, weapon_skill=4, ballistic_skill=5, strength=4, toughness=4, wounds=1,
        initiative=5, attacks=1, leadership=7, cool=7, willpower=8, intelligence=8,
    )
    escher_ganger = FighterType(
        fighter_type="Sister", gang_type_id=escher.id, fighter_class="Ganger", cost=55,
        movement=5, weapon_skill=4, ballistic_skill=4, strength=3, toughness=3, wounds=1,
        initiative=3, attacks=1, leadership=8, cool=7, willpower=7, intelligence=7,
    )
    hive_scum = FighterType(
        fighter_type="Hive Scum", gang_type_id=None, fighter_class="Hanger-on", cost=30,
        movement=5, weapon_skill=4, ballistic_skill=4, strength=3, toughness=3, wounds=1,
        initiative=4, attacks=1, leadership=8, cool=8, willpower=9, intelligence=8,
    )
    mastiff_type = FighterType(
        fighter_type="Cyber-mastiff", gang_type_id=None, fighter_class="exotic beast", cost=100,
        movement=6, weapon_skill=3, ballistic_skill=0, strength=4, toughness=4, wounds=1,
        initiative=3, attacks=2, leadership=7, cool=7, willpower=8, intelligence=8,
        special_rules=["Exotic Beast"],
    )
    session.add_all([forge_tyrant, forge_boss, bully, escher_ganger, hive_scum, mastiff_type])
    session.flush()

    session.add_all(
        [
            FighterTypeGangCost(
                fighter_type_id=hive_scum.id, gang_type_id=outcasts.id, adjusted_cost=25
            ),
            FighterDefault(fighter_type_id=bully.id, equipment_id=stub_gun.id),
            FighterDefault(fighter_type_id=forge_tyrant.id, skill_id=skills[2].id),
            FighterDefault(fighter_type_id=mastiff_type.id, equipment_id=flak.id),
            ExoticBeastGrant(equipment_id=mastiff.id, fighter_type_id=mastiff_type.id),
        ]
    )
    session.flush()


def seed_effect_types(session: Session) -> None:
    """Seed effect categories and their effect types.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    if _is_seeded(session, FighterEffectCategory):
        return

    categories = {name: FighterEffectCategory(category_name=name) for name in EFFECT_CATEGORIES}
    session.add_all(categories.values())
    session.flush()

    for name, stat, xp_cost, credits_increase in CHARACTERISTIC_ADVANCEMENTS:
        effect_type = FighterEffectType(
            effect_name=name,
            category_id=categories["advancements"].id,
            type_specific_data={"xp_cost": xp_cost, "credits_increase": credits_increase},
        )
        effect_type.modifiers.append(
            FighterEffectTypeModifier(stat_name=stat, default_numeric_value=1)
        )
        session.add(effect_type)

    for name, modifiers, extra in LASTING_INJURIES:
        effect_type = FighterEffectType(
            effect_name=name,
            category_id=categories["injuries"].id,
            type_specific_data=dict(extra),
        )
        for stat, value in modifiers.items():
            effect_type.modifiers.append(
                FighterEffectTypeModifier(stat_name=stat, default_numeric_value=value)
            )
        session.add(effect_type)

    session.add(
        FighterEffectType(
            effect_name="Hardpoint",
            category_id=categories["hardpoint"].id,
            type_specific_data={},
        )
    )

    for name, modifiers in VEHICLE_DAMAGES:
        effect_type = FighterEffectType(
            effect_name=name,
            category_id=categories["vehicle_damage"].id,
            type_specific_data={},
        )
        for stat, value in modifiers.items():
            effect_type.modifiers.append(
                FighterEffectTypeModifier(stat_name=stat, default_numeric_value=value)
            )
        session.add(effect_type)

    lasgun = session.execute(
        select(Equipment).where(Equipment.equipment_name == "Lasgun")
    ).scalar_one_or_none()
    if lasgun is not None:
        hotshot = FighterEffectType(
            effect_name="Hotshot las pack",
            category_id=categories["equipment"].id,
            equipment_id=lasgun.id,
            type_specific_data={
                "credits_increase": 20,
                "traits_to_add": ["Unstable"],
                "traits_to_remove": ["Plentiful"],
            },
        )
        hotshot.modifiers.extend(
            [
                FighterEffectTypeModifier(stat_name="strength", default_numeric_value=1),
                FighterEffectTypeModifier(stat_name="ap", default_numeric_value=-1),
                FighterEffectTypeModifier(stat_name="ammo", default_numeric_value=4, operation="set"),
            ]
        )
        session.add(hotshot)
    session.flush()


def seed_vehicle_types(session: Session) -> None:
    """Seed the vehicle catalog."""
    if _is_seeded(session, VehicleType):
        return

    session.add_all(
        [
            VehicleType(
                vehicle_type="Cargo-8 Ridgehauler", cost=250, movement=8, front=11, side=10,
                rear=9, hull_points=6, handling=5, save=4, body_slots=2, drive_slots=1,
                engine_slots=1,
                hardpoints=[
                    {"operated_by": "crew", "arcs": ["Front"], "location": "Cab"},
                    {"operated_by": "passenger", "arcs": ["Left", "Right"], "location": "Bed"},
                ],
            ),
            VehicleType(
                vehicle_type="Wolfquad", cost=80, movement=10, front=6, side=6, rear=5,
                hull_points=2, handling=6, save=5, body_slots=1, drive_slots=1, engine_slots=1,
            ),
        ]
    )
    session.flush()


def seed_campaign_catalog(session: Session) -> None:
    """Seed campaign types and their territories."""
    if _is_seeded(session, CampaignType):
        return

    dominion = CampaignType(campaign_type_name="Dominion")
    uprising = CampaignType(campaign_type_name="Uprising")
    session.add_all([dominion, uprising])
    session.flush()

    for name in ("Old Ruins", "Slag Furnace", "Settlement", "Drinking Hole", "Tunnels"):
        session.add(Territory(territory_name=name, campaign_type_id=dominion.id))
    session.flush()


def seed_all_catalog_data(session: Session) -> None:
    """Seed every catalog table.

    Args:
        session: SQLAlchemy session to use for database operations
    """
    seed_gang_catalog(session)
    seed_effect_types(session)
    seed_vehicle_types(session)
    seed_campaign_catalog(session)
