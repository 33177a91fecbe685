"""
Entity persistence services.
"""
from projectit.services.entities.service import EntityService, matches
from projectit.services.entities.repository import (
    Entities,
    EntityRepository,
    get_app_settings,
    get_integration_settings,
)

__all__ = [
    "EntityService",
    "EntityRepository",
    "Entities",
    "matches",
    "get_app_settings",
    "get_integration_settings",
]
