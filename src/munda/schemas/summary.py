"""Compact read models embedded in larger payloads."""

from .common import ORMModel


class FighterSummary(ORMModel):
    id: int
    gang_id: int
    fighter_name: str
    fighter_type: str
    fighter_class: str
    owner_id: int | None = None
    total_cost: int


class GangSummary(ORMModel):
    id: int
    name: str
    gang_type: str
    user_id: int
    credits: int
    rating: int
    wealth: int
    reputation: int
