"""Stubs that let a controller action run without a database.

Typical use in an example group's ``setup_example``::

    def setup_example(self):
        self.foos = self.stub_index(Foo)          # GET index, Foo.find -> 3 stub foos
        self.foo = self.stub_update(Foo)          # PUT update id=<foo.id>

Each ``stub_<action>`` wrapper also implies the request (verb and action)
when the group did not declare ``the_request``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from skinnyspec.adapters.orm.active_record import records_to_json, records_to_xml
from skinnyspec.domain.inflection import pluralize, underscore
from skinnyspec.domain.sentinels import ALL

if TYPE_CHECKING:
    from .mocking import MockSpace

logger = logging.getLogger(__name__)


class StubCollection(list[Any]):
    """List of stub records that also serializes like a record collection."""

    def to_xml(self) -> str:
        root = pluralize(underscore(type(self[0]).__name__)) if self else "records"
        return records_to_xml(self, root=root)

    def to_json(self) -> str:
        return records_to_json(self)


class ControllerStubHelpers:
    """``stub_*`` helpers mixed into the example group."""

    mocks: MockSpace

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def stub_out(self, target: Any, stubs: Mapping[str, Any] | None = None) -> Any:
        """Stub each ``method -> return value`` pair of ``stubs`` on ``target``."""
        for method, value in (stubs or {}).items():
            self.mocks.stub(target, method, value)
        return target

    def stub_formatted(self, target: Any, format_name: str) -> Any:
        """Make ``target.to_<format>()`` return a recognisable placeholder."""
        label = type(target[0]).__name__ if isinstance(target, list) and target else type(target).__name__
        self.mocks.stub(target, f"to_{format_name}", f"{label} formatted as {format_name}")
        return target

    def stub_find_all(
        self,
        klass: type,
        *,
        size: int = 3,
        format: str | None = None,  # pylint: disable=redefined-builtin
        stub: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> StubCollection:
        """Stub ``klass.find("all", ...)`` to return ``size`` stub records.

        Args:
            klass: Model class.
            size: Number of records in the collection.
            format: Response format; sets ``params["format"]`` and stubs
                ``to_<format>`` on the collection.
            stub: Extra ``method -> value`` stubs for every record.
            **options: Finder options the stub is restricted to
                (``conditions={...}``).
        """
        collection = StubCollection(self.stub_model(klass) for _ in range(size))
        for record in collection:
            self.stub_out(record, stub)
        if format is not None:
            self.stub_formatted(collection, format)
            self.set_param("format", format)
        expectation = self.mocks.stub(klass, "find", collection)
        if options:
            expectation.with_args(ALL, **options)
        return collection

    def stub_find_one(
        self,
        klass: type,
        *,
        format: str | None = None,  # pylint: disable=redefined-builtin
        stub: Mapping[str, Any] | None = None,
        current_object: bool = False,
        stub_ar: str | None = None,
        stub_ar_return: Any = True,
    ) -> Any:
        """Stub ``klass.find(<id>)`` to return one stub record.

        Args:
            klass: Model class.
            format: Response format, as for :meth:`stub_find_all`.
            stub: Extra ``method -> value`` stubs for the record.
            current_object: Put the record's id into ``params["id"]``.
            stub_ar: Persistence method to stub (``"update_attributes"``).
            stub_ar_return: Return value for ``stub_ar``.
        """
        record = self.stub_model(klass)
        self.stub_out(record, stub)
        if format is not None:
            self.stub_formatted(record, format)
            self.set_param("format", format)
        if current_object:
            self.set_param("id", record.id)
            if stub_ar:
                self.mocks.stub(record, stub_ar, stub_ar_return)
        self.mocks.stub(klass, "find", record).with_args(record.id)
        return record

    def stub_initialize(
        self,
        klass: type,
        *,
        stub: Mapping[str, Any] | None = None,
        stub_save: bool = False,
        save_result: bool = True,
    ) -> Any:
        """Stub ``klass.new(...)`` to return a new stub record.

        Args:
            klass: Model class.
            stub: Extra ``method -> value`` stubs for the record.
            stub_save: Also stub ``save`` to return ``save_result``.
            save_result: What ``save`` returns when ``stub_save`` is set.
        """
        record = self.stub_model(klass, as_new_record=True)
        self.stub_out(record, stub)
        self.mocks.stub(klass, "new", record)
        if stub_save:
            self.mocks.stub(record, "save", save_result)
        return record

    # ------------------------------------------------------------------
    # Per-action wrappers
    # ------------------------------------------------------------------

    def stub_index(self, klass: type, **options: Any) -> StubCollection:
        self.define_implicit_request("get", "index")
        return self.stub_find_all(klass, **options)

    def stub_show(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("get", "show")
        return self.stub_find_one(klass, current_object=True, **options)

    def stub_new(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("get", "new")
        return self.stub_initialize(klass, **options)

    def stub_create(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("post", "create")
        return self.stub_initialize(klass, stub_save=True, **options)

    def stub_edit(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("get", "edit")
        return self.stub_find_one(klass, current_object=True, **options)

    def stub_update(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("put", "update")
        return self.stub_find_one(klass, current_object=True, stub_ar="update_attributes", **options)

    def stub_destroy(self, klass: type, **options: Any) -> Any:
        self.define_implicit_request("delete", "destroy")
        return self.stub_find_one(klass, current_object=True, stub_ar="destroy", **options)
