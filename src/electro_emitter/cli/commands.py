"""
Emitter commands: emit, show, check, backends.

emit, show and check read emitter.toml (when present), apply CLI overrides,
load the model document and compile it.
"""

import typer
from rich.console import Console
from rich.table import Table

from electro_emitter.core.errors import EmitterError
from electro_emitter.schema import assemble_schemas
from electro_emitter.stacks import DEFAULT_BACKEND, get_backend, list_backends
from electro_emitter.stacks.electrodb import render_document

from .utils import load_model, report_error, resolve_config

console = Console()

CONFIG_OPTION = typer.Option("emitter.toml", "--config", "-c", help="Path to emitter.toml")
MODEL_OPTION = typer.Option(None, "--model", "-m", help="Model document (overrides config)")


def emit_command(
    config: str = CONFIG_OPTION,
    model: str | None = MODEL_OPTION,
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output directory (overrides config)"
    ),
    package_name: str | None = typer.Option(None, "--package-name", help="package.json name"),
    package_version: str | None = typer.Option(
        None, "--package-version", help="package.json version"
    ),
    backend: str = typer.Option(DEFAULT_BACKEND, "--backend", "-b", help="Backend to use"),
) -> None:
    """
    Compile the model document and write index.ts and package.json.

    Nothing is written when compilation fails.
    """
    try:
        selected = get_backend(backend)
        settings = resolve_config(config, model, output, package_name, package_version)
        loaded = load_model(settings)
        written = selected.generate(
            loaded.graph,
            loaded.metadata,
            settings.output_dir,
            package_name=settings.package_name,
            package_version=settings.package_version,
        )
    except EmitterError as e:
        report_error(e)

    for path in written:
        typer.echo(f"Wrote {path}")


def show_command(
    config: str = CONFIG_OPTION,
    model: str | None = MODEL_OPTION,
) -> None:
    """Print the generated entity module without writing any file."""
    try:
        settings = resolve_config(config, model)
        loaded = load_model(settings)
        source = render_document(assemble_schemas(loaded.graph, loaded.metadata))
    except EmitterError as e:
        report_error(e)

    typer.echo(source)


def check_command(
    config: str = CONFIG_OPTION,
    model: str | None = MODEL_OPTION,
) -> None:
    """Compile the model document and summarize the entities it defines."""
    try:
        settings = resolve_config(config, model)
        loaded = load_model(settings)
        schemas = assemble_schemas(loaded.graph, loaded.metadata)
    except EmitterError as e:
        report_error(e)

    if not schemas:
        typer.echo("No entities found.")
        return

    table = Table(title="Entities")
    table.add_column("Entity", style="cyan")
    table.add_column("Service")
    table.add_column("Version")
    table.add_column("Attributes", justify="right")
    table.add_column("Indexes", justify="right")
    for name, schema in schemas.items():
        table.add_row(
            name,
            schema["model"]["service"],
            schema["model"]["version"],
            str(len(schema["attributes"])),
            str(len(schema["indexes"])),
        )
    console.print(table)
    typer.echo(f"OK: {len(schemas)} entities compiled")


def backends_command() -> None:
    """List the available backends and the files they write."""
    for name in list_backends():
        capabilities = get_backend(name).get_capabilities()
        typer.echo(f"  • {name}: {capabilities.description}")
        typer.echo(f"      writes {', '.join(capabilities.output_files)}")

    typer.echo("\nUse: electro-emitter emit --backend <name>")
