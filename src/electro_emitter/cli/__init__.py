"""
Emitter CLI package.

- commands.py: emit, show, check and backends commands
- utils.py: version, logging and config helpers
"""

import typer

from .commands import backends_command, check_command, emit_command, show_command
from .utils import configure_logging, version_callback

app = typer.Typer(
    help="""electrodb-emitter - compile annotated models into ElectroDB entities

Commands:
  • emit      write index.ts and package.json
  • show      print the generated module
  • check     compile and summarize entities
  • backends  list available backends
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Global options."""
    configure_logging(verbose)


app.command(name="emit")(emit_command)
app.command(name="show")(show_command)
app.command(name="check")(check_command)
app.command(name="backends")(backends_command)


def main() -> None:
    app()


__all__ = ["app", "main"]
