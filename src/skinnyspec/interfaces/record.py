"""Contract for the ORM models the expectations are built against.

Macros never talk to a database; they replace these methods with mock
doubles and check how the controller called them. Any model class that
offers this surface works, the SQLAlchemy mixin in
``skinnyspec.adapters.orm`` being the bundled implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class RecordNotFoundError(LookupError):
    """Raised by ``find`` when no record matches the given id."""

    def __init__(self, model: str, record_id: object) -> None:
        super().__init__(f"Couldn't find {model} with id={record_id!r}")
        self.model = model
        self.record_id = record_id


@runtime_checkable
class Record(Protocol):
    """ActiveRecord-style persistence surface.

    ``find`` and ``new`` live on the class; ``save``, ``update_attributes``
    and ``destroy`` on instances. ``find`` accepts an id, ``"all"`` or
    ``"first"`` followed by keyword options such as ``conditions``.
    """

    id: Any

    @classmethod
    def find(cls, *args: Any, **options: Any) -> Any: ...

    @classmethod
    def new(cls, attributes: dict[str, Any] | None = None) -> Any: ...

    def save(self) -> bool: ...

    def update_attributes(self, attributes: dict[str, Any] | None) -> bool: ...

    def destroy(self) -> bool: ...
