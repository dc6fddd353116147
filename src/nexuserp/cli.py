from __future__ import annotations

import logging

import typer

from nexuserp.config import Settings
from nexuserp.documents import render_document
from nexuserp.schema import DocumentTemplate
from nexuserp.seed import seed_demo_data
from nexuserp.storage import init_storage

cli = typer.Typer(add_completion=False, help="Nexus ERP form engine")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(host: str | None, port: int | None) -> None:
    import uvicorn

    from nexuserp.app import create_app

    settings = Settings()
    resolved_host = host or settings.host
    resolved_port = port if port is not None else settings.port
    uvicorn.run(create_app(settings), host=resolved_host, port=resolved_port)


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    configure_logging(Settings())
    ctx.obj = {"host": host, "port": port}
    if ctx.invoked_subcommand is None:
        run_server(host, port)


@cli.command()
def run(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    """Serve the JSON API."""
    base = ctx.obj or {}
    resolved_host = host or base.get("host")
    resolved_port = port if port is not None else base.get("port")
    run_server(resolved_host, resolved_port)


@cli.command()
def seed() -> None:
    """Load the demo modules into an empty store."""
    storage = init_storage(Settings())
    if seed_demo_data(storage):
        typer.echo("Seeded demo data")
    else:
        typer.echo("Storage already has modules; nothing seeded")


@cli.command()
def render(
    template_id: int = typer.Argument(..., help="Document template id"),
    record_id: int = typer.Argument(..., help="Record id"),
) -> None:
    """Print a record rendered through a document template as HTML."""
    storage = init_storage(Settings())
    template = storage.templates.get_template(template_id)
    if not template:
        typer.echo(f"Template {template_id} not found", err=True)
        raise typer.Exit(code=1)
    record = storage.records.get_record(record_id)
    if not record:
        typer.echo(f"Record {record_id} not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(render_document(DocumentTemplate.from_dict(template), record.get("data") or {}))
