"""``skinnyspec describe``: list the examples a spec module generates.

Imports the module at PATH and prints every ``ControllerSpec`` group defined
in it with the description of each generated example, in the order pytest
would run them.

Examples
    $ skinnyspec describe tests/functional/test_foos_controller.py
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

import click

from skinnyspec.domain.errors import SkinnySpecError
from skinnyspec.helpers import ControllerSpec

from .helpers import success, warn

logger = logging.getLogger(__name__)


def load_module(path: Path) -> ModuleType:
    """Import a Python file as a module, with the working directory importable.

    Raises:
        click.ClickException: If the file cannot be imported.
    """
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    name = f"skinnyspec_describe_{path.stem}"
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise click.ClickException(f"Cannot import {path}: not a Python module")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except (ImportError, SyntaxError, SkinnySpecError) as e:
        sys.modules.pop(name, None)
        raise click.ClickException(f"Cannot import {path}: {e}") from e
    logger.debug("Imported %s as %s", path, name)
    return module


def example_groups(module: ModuleType) -> list[type[ControllerSpec]]:
    """ControllerSpec subclasses defined (not just imported) in ``module``."""
    return [
        value
        for value in vars(module).values()
        if isinstance(value, type)
        and issubclass(value, ControllerSpec)
        and value is not ControllerSpec
        and value.__module__ == module.__name__
    ]


@click.command("describe")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def describe(path: Path) -> None:
    """Print the example descriptions generated by the spec module at PATH."""
    groups = example_groups(load_module(path))
    if not groups:
        warn(f"No ControllerSpec groups found in {path}")
        return

    total = 0
    for group in groups:
        click.echo(click.style(group.__name__, bold=True))
        for _name, example in group.generated_examples():
            click.echo(f"  - {example.description}")
            total += 1
    success(f"{total} examples in {len(groups)} groups")
