"""ActiveRecord-style persistence for SQLAlchemy declarative models.

Models inherit from :class:`Base` (a SQLAlchemy ``DeclarativeBase``) and pick
up the :class:`~skinnyspec.interfaces.record.Record` surface the example
macros stub out::

    class Foo(Base):
        __tablename__ = "foos"
        id: Mapped[int] = mapped_column(primary_key=True)
        name: Mapped[str | None]

    Foo.find("all")                       # every Foo
    Foo.find(3)                           # Foo 3 or RecordNotFoundError
    Foo.find_by_name("bar")               # first Foo named "bar" or None
    Foo.new({"name": "bar"}).save()       # True

All models share one ``scoped_session``; bind it with :func:`configure_session`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Self
from xml.etree import ElementTree as ET

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker
from sqlalchemy.orm.decl_api import DeclarativeAttributeIntercept

from skinnyspec.domain.inflection import pluralize, underscore
from skinnyspec.domain.sentinels import ALL
from skinnyspec.interfaces.record import RecordNotFoundError

from .engine import make_engine, metadata

logger = logging.getLogger(__name__)

FIRST = "first"

Session = scoped_session(sessionmaker(expire_on_commit=False))


def configure_session(url: str, *, create_schema: bool = True) -> None:
    """Bind the shared session to a database and optionally create the tables.

    Args:
        url: SQLAlchemy database URL.
        create_schema: Run ``metadata.create_all`` on the new engine.
    """
    Session.remove()
    engine = make_engine(url)
    Session.configure(bind=engine)
    if create_schema:
        metadata.create_all(engine)
    logger.debug("Bound ActiveRecord session to %s", engine.url)


def remove_session() -> None:
    """Close the current session and dispose of its engine."""
    bind = Session.session_factory.kw.get("bind")
    Session.remove()
    if bind is not None:
        bind.dispose()


def _coerce_id(value: Any) -> Any:
    # ids from request params arrive as strings
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


class ActiveRecord:
    """Mixin providing ``find``/``new``/``save``/``update_attributes``/``destroy``.

    ``validate`` may be overridden to return error messages; a record with
    errors is not saved and ``save`` returns False.
    """

    session = Session

    # ------------------------------------------------------------------
    # Class-level finders
    # ------------------------------------------------------------------

    @classmethod
    def find(
        cls,
        scope: Any,
        *,
        conditions: Mapping[str, Any] | None = None,
        order: str | None = None,
        limit: int | None = None,
    ) -> Any:
        """Find one record by id, the first record, or all records.

        Args:
            scope: ``"all"``, ``"first"`` or a primary key value.
            conditions: Column equality filters.
            order: Column name to order by.
            limit: Maximum number of records for ``"all"``.

        Returns:
            A list for ``"all"``, a record (or None) for ``"first"``, and a
            record for an id.

        Raises:
            RecordNotFoundError: If no record has the given id.
        """
        stmt = select(cls)
        if conditions:
            stmt = stmt.filter_by(**conditions)
        if order:
            stmt = stmt.order_by(getattr(cls, order))
        if scope == ALL:
            if limit is not None:
                stmt = stmt.limit(limit)
            return list(cls.session.scalars(stmt))
        if scope == FIRST:
            return cls.session.scalars(stmt.limit(1)).first()

        record_id = _coerce_id(scope)
        record = cls.session.scalars(stmt.filter_by(id=record_id)).first()
        if record is None:
            raise RecordNotFoundError(cls.__name__, record_id)
        return record

    @classmethod
    def find_by(cls, **criteria: Any) -> Self | None:
        return cls.find(FIRST, conditions=criteria)

    @classmethod
    def find_all_by(cls, **criteria: Any) -> list[Self]:
        return cls.find(ALL, conditions=criteria)

    @classmethod
    def new(cls, attributes: Mapping[str, Any] | None = None) -> Self:
        """Build an unsaved record from ``attributes``."""
        return cls(**dict(attributes or {}))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def validate(self) -> list[str]:
        return []

    @property
    def errors(self) -> list[str]:
        return getattr(self, "_errors", [])

    def is_new_record(self) -> bool:
        return sa_inspect(self).key is None and getattr(self, "id", None) is None

    def save(self) -> bool:
        errors = self.validate()
        self._errors = errors
        if errors:
            logger.debug("Not saving %r: %s", self, errors)
            return False
        try:
            self.session.add(self)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return True

    def update_attributes(self, attributes: Mapping[str, Any] | None) -> bool:
        for name, value in (attributes or {}).items():
            setattr(self, name, value)
        return self.save()

    def destroy(self) -> bool:
        try:
            self.session.delete(self)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return True

    def association(self, name: str) -> AssociationScope:
        """Return a scope over the ``name`` relationship (nested resources)."""
        return AssociationScope(self, name)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {column.key: getattr(self, column.key) for column in sa_inspect(type(self)).columns}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, sort_keys=True)

    def to_xml(self) -> str:
        return _XML_DECLARATION + ET.tostring(self._xml_element(), encoding="unicode")

    def _xml_element(self) -> ET.Element:
        root = ET.Element(underscore(type(self).__name__).replace("_", "-"))
        for key, value in self.to_dict().items():
            child = ET.SubElement(root, key.replace("_", "-"))
            if value is None:
                child.set("nil", "true")
            else:
                child.text = str(value)
        return root

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)!r}>"


class DynamicFinders(DeclarativeAttributeIntercept):
    """Metaclass answering ``find_by_<column>`` and ``find_all_by_<column>``."""

    def __getattr__(cls, attr: str) -> Any:
        for prefix, finder in (("find_all_by_", "find_all_by"), ("find_by_", "find_by")):
            if attr.startswith(prefix) and len(attr) > len(prefix):
                column = attr[len(prefix):]
                bound = getattr(cls, finder)
                return lambda value: bound(**{column: value})
        raise AttributeError(f"type object {cls.__name__!r} has no attribute {attr!r}")


class Base(ActiveRecord, DeclarativeBase, metaclass=DynamicFinders):
    """Declarative base for models that should behave like active records."""

    metadata = metadata


_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def records_to_json(records: Iterable[Any]) -> str:
    return json.dumps([record.to_dict() for record in records], default=str, sort_keys=True)


def records_to_xml(records: Iterable[Any], root: str = "records") -> str:
    element = ET.Element(root.replace("_", "-"), type="array")
    for record in records:
        element.append(record._xml_element())  # pylint: disable=protected-access
    return _XML_DECLARATION + ET.tostring(element, encoding="unicode")


class AssociationScope:
    """Finder/builder bound to one relationship of an owner record."""

    def __init__(self, owner: Any, name: str) -> None:
        self.owner = owner
        self.name = name

    @property
    def model(self) -> type:
        return sa_inspect(type(self.owner)).relationships[self.name].mapper.class_

    def all(self) -> list[Any]:
        return list(getattr(self.owner, self.name))

    def find(self, scope: Any) -> Any:
        if scope == ALL:
            return self.all()
        record_id = _coerce_id(scope)
        for record in getattr(self.owner, self.name):
            if record.id == record_id:
                return record
        raise RecordNotFoundError(self.model.__name__, record_id)

    def new(self, attributes: Mapping[str, Any] | None = None) -> Any:
        record = self.model.new(attributes)
        getattr(self.owner, self.name).append(record)
        return record

    def __repr__(self) -> str:
        return f"<AssociationScope {type(self.owner).__name__}.{self.name}>"


