"""Helpers for controllers of resources nested under a parent resource.

With ``nested_under = "post"`` a comments controller is expected to load
``Post.find(params["post_id"])`` and then go through the post's
``association("comments")`` scope instead of the ``Comment`` class.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from skinnyspec.adapters.orm.active_record import AssociationScope
from skinnyspec.domain.inflection import is_singular, pluralize
from skinnyspec.domain.sentinels import ALL

if TYPE_CHECKING:
    from .mocking import MockSpace

logger = logging.getLogger(__name__)


class NestedResourceHelpers:
    """Expectations for the parent lookup of nested resources."""

    #: Singular name of the parent resource (``"post"``), or None.
    nested_under: ClassVar[str | None] = None

    mocks: MockSpace

    def has_parent(self) -> bool:
        return self.nested_under is not None

    def parent_instance(self) -> Any:
        """Return the example's parent record (``self.<nested_under>``)."""
        if self.nested_under is None:
            return None
        return self.require_instance(self.nested_under)

    def parentize_params(self) -> dict[str, Any]:
        """``{"<parent>_id": parent.id}`` for nested groups, else ``{}``."""
        if self.nested_under is None:
            return {}
        return {f"{self.nested_under}_id": self.parent_instance().id}

    def expect_parent_scope(self, name: str) -> AssociationScope:
        """Expect the parent lookup and return the association scope for ``name``."""
        parent = self.parent_instance()
        self.mocks.should_receive(self.class_for(self.nested_under), "find").with_args(
            parent.id
        ).and_return(parent)
        scope = AssociationScope(parent, pluralize(name))
        self.mocks.stub(parent, "association", scope).with_args(pluralize(name))
        return scope

    def create_nested_resource_collection_expectations(self, name: str) -> None:
        """Expect the parent to be found and its scope to find ``name``.

        A plural name expects ``scope.find("all")`` returning ``self.<name>``;
        a singular one expects ``scope.find(self.<name>.id)``.
        """
        scope = self.expect_parent_scope(name)
        instance = self.require_instance(name)
        argument = instance.id if is_singular(name) else ALL
        self.mocks.should_receive(scope, "find").with_args(argument).and_return(instance)
        logger.debug("Expecting %s.%s.find(%r)", self.nested_under, pluralize(name), argument)

    def create_nested_resource_instance_expectation(self, name: str) -> None:
        """Expect the parent to be found and its scope to build ``self.<name>``."""
        scope = self.expect_parent_scope(name)
        self.mocks.should_receive(scope, "new").and_return(self.require_instance(name))
