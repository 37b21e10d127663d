"""Render the client module and write generated output.

Takes the structure from context_builder and produces TypeScript source.
Output is rendered in full before anything is written.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from dataclasses import asdict
from pathlib import Path

import jinja2

from .config import GenerationOptions
from .context_builder import ClientModule, build_client_module
from .errors import GenerationError
from .schema_parser import SchemaDocument

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = "client.ts.j2"


def js_string(value: str) -> str:
    """Quote a value as a JavaScript string literal."""
    return json.dumps(value)


def comment(text: str) -> str:
    """Flatten text onto one line that cannot close a block comment."""
    return " ".join(text.split()).replace("*/", "*\\/")


def make_environment(template_dir: Path = TEMPLATE_DIR) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["js_string"] = js_string
    env.filters["comment"] = comment
    return env


def render(
    module: ClientModule,
    template_name: str = DEFAULT_TEMPLATE,
    env: jinja2.Environment | None = None,
) -> str:
    """Render a client module to source text."""
    env = env or make_environment()
    try:
        template = env.get_template(template_name)
        return template.render(**asdict(module))
    except jinja2.TemplateError as exc:
        raise GenerationError(f"template {template_name!r} failed: {exc}") from exc


def generate_source(document: SchemaDocument, options: GenerationOptions | None = None) -> str:
    """Build and render the whole output unit for a document."""
    module = build_client_module(document, options)
    source = render(module)
    logger.debug("rendered %d characters", len(source))
    return source


def write_output(source: str, output_path: Path | None = None) -> None:
    """Write rendered source to a file, or to stdout without a path."""
    if output_path is None:
        sys.stdout.write(source)
        sys.stdout.flush()
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # a failed write must not leave a truncated file at output_path
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", dir=output_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except BaseException:
        os.unlink(tmp_name)
        raise
    logger.debug("wrote %s", output_path)
