"""CLI entry point for postman2openapi."""

import logging
import sys
from pathlib import Path

import click

from postman2openapi.parser.postman import CollectionError, parse_postman_str
from postman2openapi.transpiler import TargetFormat, TranspileOptions, render, transpile


@click.command()
@click.argument("input_file", default="-", type=click.File("r", encoding="utf-8"))
@click.option("-f", "--format", "fmt", default="yaml", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write to a file instead of stdout.")
@click.option("--credits", default=None, type=click.IntRange(min=0), help="Variable substitution rounds per string.")
@click.option("-v", "--verbose", is_flag=True, help="Log conversion details to stderr.")
def main(input_file, fmt: str, output: Path | None, credits: int | None, verbose: bool):
    """Convert a Postman collection (file or stdin) into an OpenAPI 3.0 document."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    options = TranspileOptions(format=TargetFormat(fmt))
    if credits is not None:
        options.replace_credits = credits

    source = "<stdin>" if input_file.name == "<stdin>" else input_file.name
    try:
        collection = parse_postman_str(input_file.read())
    except (CollectionError, OSError) as e:
        click.echo(f"Error: could not read {source}: {e}", err=True)
        sys.exit(1)

    document = transpile(collection, options)
    if verbose:
        click.echo(f"Converted {source}: {len(document.paths)} paths, {len(document.tags)} tags.", err=True)

    text = render(document, options.format)
    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}", err=True)
