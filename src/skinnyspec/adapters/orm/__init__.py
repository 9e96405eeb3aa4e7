"""SQLAlchemy implementation of the record contract."""

from .active_record import (
    ActiveRecord,
    AssociationScope,
    Base,
    DynamicFinders,
    Session,
    configure_session,
    records_to_json,
    records_to_xml,
    remove_session,
)
from .engine import is_sqlite, make_engine, metadata

__all__ = [
    "ActiveRecord",
    "AssociationScope",
    "Base",
    "DynamicFinders",
    "Session",
    "configure_session",
    "is_sqlite",
    "make_engine",
    "metadata",
    "records_to_json",
    "records_to_xml",
    "remove_session",
]
