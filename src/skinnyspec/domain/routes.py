"""The conventional RESTful action table and request planning.

``plan_routes`` decides which requests ``with_restful_actions`` issues:

    >>> [r.action for r in plan_routes(("show", "edit"))]
    ['show', 'edit']
    >>> [r.action for r in plan_routes((), collection={"list": "get"})][-1]
    'list'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .sentinels import ALL

DEFAULT_ACTIONS: Mapping[str, str] = MappingProxyType(
    {
        "index": "get",
        "show": "get",
        "new": "get",
        "create": "post",
        "edit": "get",
        "update": "put",
        "destroy": "delete",
    }
)

#: Default actions that address a single resource and therefore need an id.
MEMBER_ACTIONS: frozenset[str] = frozenset({"show", "edit", "update", "destroy"})

HTTP_VERBS: frozenset[str] = frozenset({"get", "post", "put", "patch", "delete"})


@dataclass(frozen=True, slots=True)
class Route:
    """One planned request: controller action, HTTP verb and member flag."""

    action: str
    verb: str
    member: bool

    def __str__(self) -> str:
        return f"{self.verb.upper()} {self.action}"


def _normalize_verb(action: str, verb: str) -> str:
    lowered = str(verb).lower()
    if lowered not in HTTP_VERBS:
        raise ValueError(f"Unsupported HTTP verb {verb!r} for action {action!r}")
    return lowered


def plan_routes(
    actions: Iterable[str] = (),
    collection: Mapping[str, str] | None = None,
    member: Mapping[str, str] | None = None,
) -> list[Route]:
    """Plan the requests for a set of RESTful actions.

    Args:
        actions: Default action names to keep. Empty, or containing ``"all"``,
            keeps every default action. Names that are not default actions
            are ignored.
        collection: Extra ``action -> verb`` routes that act on the collection.
        member: Extra ``action -> verb`` routes that act on a single resource.

    Returns:
        list[Route]: Routes in request order: default actions in table order,
        then member routes, then collection routes. A custom route replaces a
        default route of the same name in place.
    """
    wanted = list(actions)
    planned: dict[str, str] = dict(DEFAULT_ACTIONS)
    if wanted and ALL not in wanted:
        planned = {name: verb for name, verb in planned.items() if name in wanted}

    member = dict(member or {})
    for name, verb in member.items():
        planned[name] = _normalize_verb(name, verb)
    for name, verb in (collection or {}).items():
        planned[name] = _normalize_verb(name, verb)

    return [
        Route(action=name, verb=verb, member=name in MEMBER_ACTIONS or name in member)
        for name, verb in planned.items()
    ]


def describe_actions(
    actions: Iterable[str] = (),
    collection: Mapping[str, str] | None = None,
    member: Mapping[str, str] | None = None,
) -> str:
    """Comma-join the action names a requirement applies to.

    With no explicit actions, the default action names are listed, followed by
    any collection and member route names.
    """
    names = [name for name in actions if name != ALL] or list(DEFAULT_ACTIONS)
    names.extend(collection or {})
    names.extend(member or {})
    return ", ".join(names)
