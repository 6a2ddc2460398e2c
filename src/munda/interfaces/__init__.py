"""Protocol-based interfaces for Munda Manager services.

The operational services depend on these contracts rather than on the
concrete helper classes, so tests can pass in lightweight fakes.
"""

from munda.interfaces.beasts import IBeastService
from munda.interfaces.financials import IFinancialsService
from munda.interfaces.gang_log import IGangLogService

__all__ = [
    "IBeastService",
    "IFinancialsService",
    "IGangLogService",
]
