# src/sfmock/command_schema.py
from __future__ import annotations

from pathlib import Path

import click

from .config import configuration
from .describe import DescribeClient, SFConfig
from .exceptions import MissingCredentialsError, SchemaUnavailableError
from .schema import SchemaManager, load_schema, required_fields


def _resolve_schema_file(schema_file: Path | None) -> Path:
    """Use --file if given, else SFMOCK_SCHEMA_FILE."""
    if schema_file is not None:
        return schema_file
    configured = configuration().schema_file
    if configured:
        return Path(configured)
    raise click.ClickException(
        "No schema file given. Pass --file or set SFMOCK_SCHEMA_FILE (a .env file works too)."
    )


@click.group(help="Dump and inspect the field schema used by the mock client.")
def schema_cmd() -> None:
    """CLI group for schema commands."""


@schema_cmd.command("dump")
@click.argument("objects", nargs=-1)
@click.option(
    "-f",
    "--file",
    "schema_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Where to write the YAML schema (default: SFMOCK_SCHEMA_FILE).",
)
def dump_cmd(objects: tuple[str, ...], schema_file: Path | None) -> None:
    """Describe OBJECTS on the live org and write their schema.

    With no OBJECTS, SFMOCK_OBJECTS_FOR_SCHEMA (comma separated) is used.
    """
    target = _resolve_schema_file(schema_file)
    names = objects or configuration().objects_for_schema
    if not names:
        raise click.ClickException("No objects to dump. Name them or set SFMOCK_OBJECTS_FOR_SCHEMA.")

    api = DescribeClient(SFConfig.from_env())
    try:
        api.connect()
    except MissingCredentialsError as e:
        needed = ", ".join(e.missing)
        msg = (
            f"Missing Salesforce credentials: {needed}\n\n"
            "Set these environment variables (or create a .env file):\n"
            "  SF_CLIENT_ID=...             # Connected App Consumer Key\n"
            "  SF_CLIENT_SECRET=...         # Connected App Client Secret\n"
            "  SF_LOGIN_URL=https://login.salesforce.com  # or your custom domain URL\n"
            "or provide SF_ACCESS_TOKEN and SF_INSTANCE_URL directly."
        )
        raise click.ClickException(msg) from e

    schema = SchemaManager(api).dump_schema(names, target)
    for name, spec in schema.items():
        click.echo(f"{name}: {len(spec)} fields, {len(required_fields(spec))} required")
    click.echo(f"Schema written to {target}")


@schema_cmd.command("show")
@click.argument("object_name", metavar="OBJECT")
@click.option(
    "-f",
    "--file",
    "schema_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Schema file to read (default: SFMOCK_SCHEMA_FILE).",
)
def show_cmd(object_name: str, schema_file: Path | None) -> None:
    """List the fields of OBJECT, required ones first."""
    try:
        schema = load_schema(_resolve_schema_file(schema_file))
    except SchemaUnavailableError as e:
        raise click.ClickException(str(e)) from e

    spec = schema.get(object_name)
    if spec is None:
        raise click.ClickException(f"No schema for Salesforce object {object_name}")

    required = required_fields(spec)
    for name in required:
        click.echo(f"* {name}")
    for name in spec:
        if name not in required:
            click.echo(f"  {name}")
