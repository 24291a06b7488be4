"""CLI entry point for tg-bot-codegen."""

from collections.abc import Callable
from pathlib import Path

import click

from tg_bot_codegen.errors import CodegenError
from tg_bot_codegen.generator.index import render_payload_index
from tg_bot_codegen.generator.payload import PayloadGenerator
from tg_bot_codegen.generator.requester import render_requester, render_requester_forward
from tg_bot_codegen.logging import configure_logging
from tg_bot_codegen.pipeline import prepare_schema
from tg_bot_codegen.schema.base import Schema

schema_argument = click.argument(
    "schema_path",
    envvar="SC_PATH",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _prepare(schema_path: Path) -> Schema:
    click.echo(f"Loading {schema_path}...", err=True)
    try:
        schema = prepare_schema(schema_path)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e
    click.echo(
        f"Found {len(schema.methods)} methods (Bot API {schema.api_version.ver}).",
        err=True,
    )
    return schema


def _emit(render: Callable[[Schema], str], schema_path: Path, output: Path | None) -> None:
    schema = _prepare(schema_path)
    try:
        text = render(schema)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


output_file_option = click.option(
    "-o",
    "--output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to this file instead of stdout.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """tg-bot-codegen: generate Bot API client code from a methods schema."""
    configure_logging(verbose=verbose)


@main.command()
@schema_argument
@click.option(
    "-o",
    "--output",
    required=True,
    envvar="PL_PATH",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for payload files.",
)
def payloads(schema_path: Path, output: Path):
    """Generate one payload file per method."""
    schema = _prepare(schema_path)

    click.echo("Generating payloads...", err=True)
    try:
        files = PayloadGenerator().generate(schema)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    output.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output / filename
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}", err=True)

    click.echo(f"Generated {len(files)} files in {output}", err=True)


@main.command("payload-index")
@schema_argument
@output_file_option
def payload_index(schema_path: Path, output: Path | None):
    """Print payload module declarations and setters re-exports."""
    _emit(render_payload_index, schema_path, output)


@main.command()
@schema_argument
@output_file_option
def requester(schema_path: Path, output: Path | None):
    """Print the Requester trait items."""
    _emit(render_requester, schema_path, output)


@main.command("requester-forward")
@schema_argument
@output_file_option
def requester_forward(schema_path: Path, output: Path | None):
    """Print the requester_forward! macro."""
    _emit(render_requester_forward, schema_path, output)
