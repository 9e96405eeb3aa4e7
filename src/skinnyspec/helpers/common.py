"""Name resolution shared by every example helper.

A resource name used in a macro (``"foo"``, ``"foos"``) resolves to:

* an *instance*: the example attribute of the same name (``self.foo``);
* a *model class*: ``classify(name)`` (``Foo``) looked up in the group's
  ``models`` mapping, then ``model_namespace``, then the module of the
  controller under test.
"""

from __future__ import annotations

import itertools
import logging
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from skinnyspec.domain.errors import MissingInstanceError, UnknownModelError
from skinnyspec.domain.inflection import classify

if TYPE_CHECKING:
    from .mocking import MockSpace

logger = logging.getLogger(__name__)

_stub_ids = itertools.count(1001)

#: Persistence methods every stubbed model answers without touching a database.
STUBBED_PERSISTENCE = ("save", "update_attributes", "destroy")


class CommonSpecHelpers:
    """Resolve resource names to model classes and example instances."""

    #: Explicit ``name -> model class`` registrations (``{"foo": Foo}``).
    models: ClassVar[Mapping[str, type]] = {}
    #: Module or object whose attributes are searched for ``classify(name)``.
    model_namespace: ClassVar[Any] = None
    controller_class: ClassVar[type | None] = None

    mocks: MockSpace

    def class_for(self, name: str) -> type:
        """Return the model class for ``name``.

        Raises:
            UnknownModelError: If no namespace defines the classified name.
        """
        class_name = classify(name)
        for key in (name, class_name):
            if key in self.models:
                return self.models[key]
        for namespace in self._model_namespaces():
            found = (
                namespace.get(class_name)
                if isinstance(namespace, Mapping)
                else getattr(namespace, class_name, None)
            )
            if isinstance(found, type):
                return found
        raise UnknownModelError(name, class_name)

    def _model_namespaces(self) -> list[Any]:
        namespaces: list[Any] = []
        if self.model_namespace is not None:
            namespaces.append(self.model_namespace)
        if self.controller_class is not None:
            namespaces.append(sys.modules.get(self.controller_class.__module__))
        namespaces.append(sys.modules.get(type(self).__module__))
        return [namespace for namespace in namespaces if namespace is not None]

    def instance_for(self, name: str) -> Any:
        """Return ``self.<name>``, or None when the example never set it."""
        return getattr(self, name, None)

    def require_instance(self, name: str) -> Any:
        instance = self.instance_for(name)
        if instance is None:
            raise MissingInstanceError(name)
        return instance

    def stub_model(self, klass: type, as_new_record: bool = False, **attributes: Any) -> Any:
        """Build an unsaved ``klass`` instance that behaves as if persisted.

        The instance gets a fresh id (unless ``as_new_record``) and its
        ``save``, ``update_attributes`` and ``destroy`` are stubbed to return
        True, so controllers can run against it without a database.
        Expectations set later on the same methods take precedence.

        Args:
            klass: Model class to instantiate.
            as_new_record: Leave ``id`` unset, like a record built by ``new``.
            **attributes: Attribute values for the instance.
        """
        record = klass.new(attributes) if hasattr(klass, "new") else klass(**attributes)
        if not as_new_record and getattr(record, "id", None) is None:
            record.id = next(_stub_ids)
        for method in STUBBED_PERSISTENCE:
            self.mocks.stub(record, method, True)
        self.mocks.stub(record, "is_new_record", as_new_record)
        logger.debug("Stubbed %r", record)
        return record
