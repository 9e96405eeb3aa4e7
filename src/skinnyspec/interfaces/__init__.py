"""Interfaces (ports) the DSL depends on.

Define the contracts the example helpers need from the outside world: a
model persistence surface and a controller test harness. Implementations
live in `skinnyspec.adapters`.

Dependency rule: may import `skinnyspec.domain`; must not import
`skinnyspec.adapters` or `skinnyspec.helpers`.
"""

from .harness import AbstractControllerHarness, Response
from .record import Record, RecordNotFoundError

__all__ = [
    "AbstractControllerHarness",
    "Record",
    "RecordNotFoundError",
    "Response",
]
