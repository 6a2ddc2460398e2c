"""Pure game rules for Munda Manager.

Nothing in this package touches the database session. It exposes:

* Enumerations shared by services, schemas and routes (see :mod:`enums`).
* Rule constants (see :mod:`rules_config`).
* Fighter status rules (see :mod:`fighter_status`).
* Stat and weapon profile modifiers (see :mod:`effects`).
* Fighter cost and gang rating aggregation (see :mod:`costs`).
"""

from . import costs, effects, enums, fighter_status, rules_config

__all__ = [
    "costs",
    "effects",
    "enums",
    "fighter_status",
    "rules_config",
]
