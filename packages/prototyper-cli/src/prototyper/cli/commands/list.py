from pathlib import Path
from typing import List, Optional

import typer

from prototyper.common import bus
from prototyper.needle import L, needle
from prototyper.spec import ConfigError
from prototyper.cli.factories import make_app


def list_command(
    paths: Optional[List[Path]] = typer.Argument(
        None, help=needle.get(L.cli.argument.paths.help)
    ),
):
    try:
        app_instance = make_app()
    except ConfigError as e:
        bus.error(L.error.config, error=e)
        raise typer.Exit(code=1)

    app_instance.run_list(paths or None)
    if app_instance.error_count:
        raise typer.Exit(code=1)
