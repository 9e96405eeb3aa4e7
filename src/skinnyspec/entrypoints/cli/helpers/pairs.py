"""Click callbacks for ``NAME=VALUE`` options.

``-L sqlalchemy=INFO`` and ``--member preview=post`` share one grammar: a
repeatable option (or an environment variable) holding comma or whitespace
separated ``NAME=VALUE`` items, where later items win. :func:`read_pairs`
handles the grammar; the callbacks only check the value side.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator

import click

from skinnyspec.domain.routes import HTTP_VERBS

OptionValue = str | list[str] | tuple[str, ...] | None

# Libraries that chat at DEBUG/INFO while examples run.
QUIET_LOGGERS = {"sqlalchemy": logging.WARNING, "werkzeug": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def split_items(value: OptionValue) -> list[str]:
    """Flatten a raw option value into non-empty items.

    >>> split_items(("a=1,b=2", " c=3 "))
    ['a=1', 'b=2', 'c=3']
    """
    if value is None:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in _SEPARATORS.split(chunk) if item]


def read_pairs(value: OptionValue, label: str) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` for every item, both sides stripped.

    Raises:
        click.BadParameter: If an item has no ``=`` or an empty name.
    """
    for item in split_items(value):
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME={label}, got {item!r}")
        yield name.strip(), raw.strip()


def _pairs_callback(
    label: str, convert: Callable[[str], object], defaults: dict | None = None
) -> Callable[[click.Context, click.Parameter | None, OptionValue], dict]:
    def callback(ctx, param, value):  # pylint: disable=unused-argument
        parsed = dict(defaults or {})
        for name, raw in read_pairs(value, label):
            parsed[name] = convert(raw)
        return parsed

    callback.__name__ = f"parse_{label.lower()}_pairs"
    return callback


def log_level(raw: str) -> int:
    """Numeric level for a level name such as ``info``."""
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise click.BadParameter(f"Invalid log level: {raw}")
    return level


def http_verb(raw: str) -> str:
    """Lower-cased verb, checked against the verbs the harness can send."""
    verb = raw.lower()
    if verb not in HTTP_VERBS:
        raise click.BadParameter(
            f"Invalid HTTP verb {verb!r}; expected one of {', '.join(sorted(HTTP_VERBS))}"
        )
    return verb


parse_log_level = _pairs_callback("LEVEL", log_level, QUIET_LOGGERS)
parse_log_level.__doc__ = "Logger name -> numeric level, on top of QUIET_LOGGERS."

parse_routes = _pairs_callback("VERB", http_verb)
parse_routes.__doc__ = "Action name -> HTTP verb, in the order given."
