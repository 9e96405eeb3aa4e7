"""Marker values used by the example macros.

Macros accept plain Python values for comparisons (``it_should_assign(foo="bar")``),
so marker states need values that can never be confused with real data:

* ``NIL``: the value must be ``None`` (``it_should_assign(foo=NIL)``).
* ``NOT_NIL``: any value other than ``None``.
* ``UNDEFINED``: the controller never set the attribute at all.
* ``ALL``: the collection scope passed to ``find`` (``Foo.find("all")``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class Marker:
    """A named singleton marker compared by identity of its name."""

    name: str

    def __repr__(self) -> str:
        return self.name


NIL: Final = Marker("NIL")
NOT_NIL: Final = Marker("NOT_NIL")
UNDEFINED: Final = Marker("UNDEFINED")

#: Collection scope for ``find``. A plain string so host models and stubs
#: can compare against it without importing this module.
ALL: Final = "all"
