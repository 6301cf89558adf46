from pathlib import Path
from typing import List, Optional

import typer

from prototyper.common import bus
from prototyper.needle import L, needle
from prototyper.spec import ConfigError
from prototyper.cli.factories import make_app


def inject_command(
    paths: Optional[List[Path]] = typer.Argument(
        None, help=needle.get(L.cli.argument.paths.help)
    ),
    remove_trait: bool = typer.Option(
        False, "--remove-trait", help=needle.get(L.cli.option.remove_trait.help)
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help=needle.get(L.cli.option.dry_run.help)
    ),
):
    try:
        app_instance = make_app()
    except ConfigError as e:
        bus.error(L.error.config, error=e)
        raise typer.Exit(code=1)

    app_instance.run_inject(paths or None, remove_trait=remove_trait, dry_run=dry_run)
    if app_instance.error_count:
        raise typer.Exit(code=1)
