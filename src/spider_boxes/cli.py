"""CLI main entry point."""

import json
import logging
import os
from pathlib import Path

import click
import tomlkit

from .config import Config
from .core import Core
from .db import close_db, create_tables, init_db
from .enums import Namespace
from .errors import SpiderBoxesException
from .i18n import initialize
from .log import setup as setup_log

logger = logging.getLogger(__name__)

NAMESPACE_CHOICE = click.Choice([namespace.value for namespace in Namespace])


def load_config(config_path: str) -> Config:
    if Path(config_path).exists():
        logger.info(f"Loading configuration file: {config_path}")
        cfg = Config.load_from_file(config_path)
    else:
        logger.warning(f"Configuration file not found: {config_path}, using defaults")
        cfg = Config()
    setup_log(cfg.log_file, cfg.log_level)
    initialize(ui_language=cfg.language)
    return cfg


def open_core(cfg: Config) -> Core:
    core = Core(cfg)
    if core.uses_database:
        init_db(cfg.storage.database_path)
        create_tables()
    return core


def export_types_document(core: Core) -> tomlkit.TOMLDocument:
    """Resolved type catalogs as a TOML document, one array of tables per namespace."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("Spider Boxes type catalog"))
    for namespace in Namespace:
        aot = tomlkit.aot()
        for type_definition in core.resolver(namespace).list_types():
            table = tomlkit.table()
            for key, value in type_definition.model_dump(mode="json", exclude_none=True).items():
                table[key] = value
            aot.append(table)
        doc[f"{namespace.value}_types"] = aot
    return doc


@click.group()
@click.option("--config", "-c", default="config.toml", help="Configuration file path")
@click.pass_context
def cli(ctx, config: str):
    """Spider Boxes - dynamic field, component and section types."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


@cli.command(name="serve")
@click.option("--host", "-h", default=None, help="Override host from config")
@click.option("--port", "-p", default=None, type=int, help="Override port from config")
@click.option("--reload/--no-reload", default=None, help="Enable/disable auto reload")
@click.pass_context
def serve(ctx, host, port, reload):
    """Start the REST API server."""
    config_path = ctx.obj["config_path"]

    try:
        cfg = load_config(config_path)

        host = host or cfg.web.host
        port = port or cfg.web.port
        if reload is None:
            reload = cfg.web.reload

        os.environ["CONFIG_FILE"] = config_path

        import uvicorn

        logger.info(f"Starting API server on http://{host}:{port}")
        uvicorn.run(
            "spider_boxes.api:create_app",
            host=host,
            port=port,
            factory=True,
            reload=reload,
        )
    except SpiderBoxesException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))


@cli.command(name="init-db")
@click.pass_context
def init_database(ctx):
    """Create the database tables."""
    try:
        cfg = load_config(ctx.obj["config_path"])
        init_db(cfg.storage.database_path)
        create_tables()
        click.echo(f"Database initialized: {cfg.storage.database_path}")
    except SpiderBoxesException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="types")
@click.option(
    "--namespace",
    "-n",
    type=NAMESPACE_CHOICE,
    default=Namespace.FIELD.value,
    help="Type namespace to list",
)
@click.pass_context
def list_types(ctx, namespace: str):
    """List resolved types of a namespace."""
    try:
        core = open_core(load_config(ctx.obj["config_path"]))
        click.echo("id\tcategory\tsupports")
        for type_definition in core.resolver(namespace).list_types():
            click.echo(
                f"{type_definition.id}\t{type_definition.category}\t"
                f"{','.join(type_definition.supports)}"
            )
    except SpiderBoxesException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="config-fields")
@click.argument("type_id")
@click.option(
    "--namespace",
    "-n",
    type=NAMESPACE_CHOICE,
    default=Namespace.FIELD.value,
    help="Type namespace",
)
@click.option("--settings", "-s", default=None, help="Existing settings as a JSON object")
@click.pass_context
def config_fields(ctx, type_id: str, namespace: str, settings: str | None):
    """Print the configuration descriptors generated for a type."""
    existing = {}
    if settings:
        try:
            existing = json.loads(settings)
        except ValueError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--settings")
        if not isinstance(existing, dict):
            raise click.BadParameter("Settings must be a JSON object", param_hint="--settings")

    try:
        core = open_core(load_config(ctx.obj["config_path"]))
        response = core.config_fields(namespace, type_id, existing)
        click.echo(json.dumps(response.model_dump(mode="json"), indent=2, ensure_ascii=False))
    except SpiderBoxesException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="export-types")
@click.option("--output", "-o", default=None, help="Write TOML to this file instead of stdout")
@click.pass_context
def export_types(ctx, output: str | None):
    """Export every resolved type catalog as TOML."""
    try:
        core = open_core(load_config(ctx.obj["config_path"]))
        content = tomlkit.dumps(export_types_document(core))
    except SpiderBoxesException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()

    if output:
        Path(output).write_text(content, encoding="utf-8")
        click.echo(f"Exported types to {output}")
    else:
        click.echo(content)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
