"""``skinnyspec routes``: preview the requests of ``with_restful_actions``.

Examples
    $ skinnyspec routes
    $ skinnyspec routes show edit update
    $ skinnyspec routes index --collection list=get --member preview=post
"""

from __future__ import annotations

import logging

import click

from skinnyspec.config import InvalidSettingError, load_settings
from skinnyspec.domain import descriptions
from skinnyspec.domain.routes import DEFAULT_ACTIONS, plan_routes
from skinnyspec.domain.sentinels import ALL

from .helpers import parse_routes, warn

logger = logging.getLogger(__name__)


@click.command("routes")
@click.argument("actions", nargs=-1)
@click.option(
    "--member",
    "member",
    multiple=True,
    callback=parse_routes,
    help="Extra member route as NAME=VERB (repeatable, e.g. --member preview=post).",
)
@click.option(
    "--collection",
    "collection",
    multiple=True,
    callback=parse_routes,
    help="Extra collection route as NAME=VERB (repeatable, e.g. --collection list=get).",
)
@click.option(
    "--member-id",
    type=click.IntRange(min=1),
    default=None,
    help="Id sent to member actions. Defaults to SKINNYSPEC_MEMBER_ID or 1.",
)
def routes(
    actions: tuple[str, ...],
    member: dict[str, str],
    collection: dict[str, str],
    member_id: int | None,
) -> None:
    """Print the requests `with_restful_actions` issues for ACTIONS.

    With no ACTIONS, or with `all` among them, every default RESTful action
    is listed.
    """
    try:
        settings = load_settings()
    except InvalidSettingError as e:
        raise click.ClickException(str(e)) from e

    unknown = [action for action in actions if action != ALL and action not in DEFAULT_ACTIONS]
    if unknown:
        warn(f"Ignoring unknown default actions: {', '.join(unknown)}")

    planned = plan_routes(actions, collection=collection, member=member)
    identifier = member_id or settings.member_id
    for route in planned:
        suffix = f"  id={identifier}" if route.member else ""
        click.echo(f"{route.verb.upper():<7} {route.action}{suffix}")

    logger.info("Planned %d requests", len(planned))
    logger.debug(descriptions.require_user(actions, collection, member))
