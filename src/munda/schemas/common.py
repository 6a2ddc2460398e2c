"""Response envelope shared by every route."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Successful response body: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str


class ORMModel(BaseModel):
    """Base for read models built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


def ok(data: object) -> dict[str, object]:
    return {"success": True, "data": data}
