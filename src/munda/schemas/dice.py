from pydantic import BaseModel, Field


class DiceRollRequest(BaseModel):
    gang_id: int = Field(..., ge=0)
    fighter_id: int | None = Field(None, ge=0)
    context: str = Field(..., min_length=1, description="What the roll is for")
    notation: str = Field(default="1d6", description="NdM, or 'd66'")


class DiceRollResult(BaseModel):
    notation: str
    rolls: list[int]
    total: int
    seed: str
    injury: str | None = None


class LastingInjuryEntry(BaseModel):
    name: str
    min_roll: int
    max_roll: int
