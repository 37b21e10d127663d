"""Entry point: python -m openapi_tsgen INPUT [-o OUTPUT]

Reads a schema document, writes the generated client to OUTPUT or stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .codegen import generate_source, write_output
from .config import DEFAULT_BASE_PATH, DEFAULT_CLIENT_NAME, DEFAULT_TIMEOUT_MS, GenerationOptions
from .errors import GenerationError
from .loader import load_document


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Output file for generated code (default: stdout).")
@click.option("--client-name", default=DEFAULT_CLIENT_NAME, show_default=True, help="Name of the exported client factory.")
@click.option("--base-path", default=DEFAULT_BASE_PATH, show_default=True, help="Default base URL of the generated client.")
@click.option("--timeout-ms", default=DEFAULT_TIMEOUT_MS, show_default=True, type=click.IntRange(min=1), help="Default request timeout of the generated client.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(input_path: Path, output: Path | None, client_name: str, base_path: str, timeout_ms: int, verbose: bool):
    """Generate a TypeScript API client from a Swagger JSON document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = GenerationOptions(client_name=client_name, base_path=base_path, timeout_ms=timeout_ms)
        document = load_document(input_path)
        source = generate_source(document, options)
        write_output(source, output)
    except (GenerationError, OSError) as exc:
        click.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    if output is not None:
        click.echo(
            f"Generated {output} ({len(document.definitions)} interfaces, {len(document.operations)} operations)",
            err=True,
        )


if __name__ == "__main__":
    main()
