"""Pydantic request and response models for the HTTP API."""

from .common import Envelope, ErrorEnvelope, ORMModel, ok
from .summary import FighterSummary, GangSummary

__all__ = [
    "Envelope",
    "ErrorEnvelope",
    "FighterSummary",
    "GangSummary",
    "ORMModel",
    "ok",
]
