#!/usr/bin/env python3
"""
Command-line interface for brewform.

Prints the form descriptor of a record class:

    brewform describe myapp.models:Person --domain https://example.com --path /people
"""

from __future__ import annotations

import importlib
import logging
import traceback

import typer

from brewform.assembler import MarshalOptions
from brewform.codec import FormCodec
from brewform.exceptions import BrewformError
from brewform.mime import MimeType

app = typer.Typer(
    name='brewform',
    help='Derive form descriptors from typed records',
    add_completion=False,
)


@app.callback()
def _callback() -> None:
    """Derive form descriptors from typed records."""


def _load_record(target: str) -> object:
    """Import 'module:attribute'."""
    module_name, sep, attribute = target.partition(':')
    if not sep or not module_name or not attribute:
        raise typer.BadParameter("Expected 'module:Class'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f'Cannot import {module_name}: {e}') from e
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise typer.BadParameter(f'{module_name} has no attribute {attribute}') from e


@app.command()
def describe(
    target: str = typer.Argument(..., help="Record class to describe, as 'module:Class'"),
    domain: str = typer.Option('', '--domain', '-d', help='Scheme and host the form submits to'),
    path: str = typer.Option('', '--path', '-p', help='Request path appended to the domain'),
    method: str | None = typer.Option(None, '--method', '-m', help='HTTP method (default: from settings)'),
    accept: str | None = typer.Option(
        None, '--accept', '-a', help='Negotiated MIME type (default: the codec content type)'
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Print the marshaled form for a record class."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='[%(levelname)s] %(name)s: %(message)s')

    record = _load_record(target)
    codec = FormCodec(domain)
    accept = accept or codec.content_type()
    if not codec.content_type_supported(accept):
        typer.secho(f'Error: Unsupported content type: {accept}', fg=typer.colors.RED, err=True)
        typer.echo(f'Expected {codec.base_mime_type}+<format>', err=True)
        raise typer.Exit(1)

    bound = codec.bind(MimeType.parse(accept)) or codec
    try:
        data = bound.marshal(record, MarshalOptions(domain=domain, request_path=path, http_method=method))
    except BrewformError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)
    typer.echo(data.decode('utf-8'))


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
