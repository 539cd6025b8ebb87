"""Database session, unit of work and repository utilities."""

from property_registry.db.session import (
    dispose_engine,
    get_db_session,
    get_engine,
    get_sessionmaker,
    session_context,
)
from property_registry.db.unit_of_work import UnitOfWork
from property_registry.db.repositories import (
    add_entity,
    add_trace,
    fetch_image,
    fetch_owner,
    fetch_properties_page,
    fetch_property,
    fetch_property_full,
    soft_delete_entity,
    update_entity,
)

__all__ = [
    "dispose_engine",
    "get_db_session",
    "get_engine",
    "get_sessionmaker",
    "session_context",
    "UnitOfWork",
    "add_entity",
    "add_trace",
    "fetch_image",
    "fetch_owner",
    "fetch_properties_page",
    "fetch_property",
    "fetch_property_full",
    "soft_delete_entity",
    "update_entity",
]
