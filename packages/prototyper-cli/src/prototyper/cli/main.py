import typer

from prototyper.common import bus
from prototyper.needle import L, needle
from .commands.inject import inject_command
from .commands.list import list_command
from .rendering import CliRenderer

app = typer.Typer(
    name="prototyper",
    help=needle.get(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=needle.get(L.cli.option.verbose.help)
    ),
):
    bus.set_renderer(CliRenderer(verbose=verbose))


app.command(name="list", help=needle.get(L.cli.command.list.help))(list_command)
app.command(name="inject", help=needle.get(L.cli.command.inject.help))(inject_command)


if __name__ == "__main__":
    app()
