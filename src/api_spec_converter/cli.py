"""CLI entry point for api-spec-converter."""

import logging
from pathlib import Path

import click
import requests

from api_spec_converter.converter import Converter
from api_spec_converter.detect import detect_format
from api_spec_converter.errors import ConverterError
from api_spec_converter.formats import EXPORTABLE, FORMATS, IMPORTABLE
from api_spec_converter.importers.base import read_source


def _resolve_format(text: str, fmt: str) -> str:
    """Resolve 'auto' to a concrete importable format."""
    if fmt != "auto":
        return fmt
    detected = detect_format(text)
    if detected not in IMPORTABLE:
        raise click.ClickException(f"Cannot import documents detected as '{detected}'.")
    return detected


@click.group()
def main():
    """API Spec Converter: convert API descriptions between formats."""
    pass


@main.command()
@click.argument("source")
@click.option("--from", "from_format", default="auto", type=click.Choice(["auto", *IMPORTABLE]), help="Source format.")
@click.option("--to", "to_format", default="raml10", type=click.Choice(EXPORTABLE), help="Target format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path. Prints to stdout if omitted.")
@click.option("-v", "--verbose", is_flag=True, help="Log conversion details.")
def convert(source: str, from_format: str, to_format: str, output: Path | None, verbose: bool):
    """Convert SOURCE (a file path or URL) to another format."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        text = read_source(source)
        from_format = _resolve_format(text, from_format)
        click.echo(f"Converting {source} ({from_format} -> {to_format})...", err=True)

        converter = Converter(from_format, to_format)
        converter.load_data(text)
        result = converter.convert()
    except (ConverterError, OSError, requests.RequestException) as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


@main.command(name="formats")
def list_formats():
    """List supported formats."""
    for tag, fmt in FORMATS.items():
        directions = [d for d, ok in (("import", fmt.can_import), ("export", fmt.can_export)) if ok]
        click.echo(f"{tag:10} {fmt.name:10} {', '.join(fmt.formats):6} {'/'.join(directions)}")
