# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
tiptap-doc command line

COMMANDS:
========

- render FILE     Render a document to HTML (or to the presentation tree as JSON)
- validate FILE   Check that a file holds a document
- normalize FILE  Rewrite a document as canonical JSON
- summary FILE    Block summary, excerpt and thumbnail candidate
- get DOC_ID      Print a stored document
- put DOC_ID FILE Store a document (canonicalized first)

A file that is not a document fails with "content unavailable" and exit code 1.
"""

import json
import logging
from typing import Optional

import click

from ..model import codec
from ..model.errors import ParseError
from ..model.nodes import Doc
from ..model.text import block_summary, excerpt, first_image_src
from ..renderer import DEFAULT_CONFIG, RendererConfig, render
from ..store import DocumentNotFound, FileDocumentStore

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _load_document(file_path: str) -> Doc:
    with open(file_path, "rb") as f:
        json_bytes = f.read()
    try:
        return codec.loads(json_bytes)
    except ParseError as e:
        raise click.ClickException(f"Content unavailable: {e}")


def _load_config(config_path: Optional[str]) -> RendererConfig:
    if config_path is None:
        return DEFAULT_CONFIG
    try:
        return RendererConfig.from_file(config_path)
    except (ValueError, TypeError) as e:
        raise click.ClickException(f"Invalid renderer configuration {config_path}: {e}")


def _write(output: Optional[str], text: str) -> None:
    if output is None:
        click.echo(text)
        return
    with open(output, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"Wrote {output}")


@click.group()
@click.option("--log-level", default="WARNING", type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="Logging level")
def main(log_level: str):
    """Rich document codec and renderer"""

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command("render")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="JSON file overriding the style mapping table")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file instead of stdout")
@click.option("--format", "output_format", default="html", type=click.Choice(["html", "tree"]),
              help="HTML markup or the presentation tree as JSON")
def render_command(file: str, config_path: Optional[str], output: Optional[str], output_format: str):
    """Render a document"""
    document = _load_document(file)
    tree = render(document, _load_config(config_path))
    if output_format == "tree":
        _write(output, json.dumps(tree.to_dict(), ensure_ascii=False, indent=2))
    else:
        _write(output, tree.to_html())


@main.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def validate_command(file: str):
    """Check that a file holds a document"""
    document = _load_document(file)
    click.echo(f"OK: {len(document.content)} blocks")


@main.command("normalize")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file instead of stdout")
@click.option("--indent", type=int, default=None, help="Pretty-print with this indent")
def normalize_command(file: str, output: Optional[str], indent: Optional[int]):
    """Rewrite a document as canonical JSON"""
    _write(output, codec.dumps(_load_document(file), indent=indent))


@main.command("summary")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def summary_command(file: str):
    """Summarize a document"""
    document = _load_document(file)
    summary = block_summary(document)
    summary["excerpt"] = excerpt(document)
    summary["thumbnail"] = first_image_src(document)
    click.echo(json.dumps(summary, ensure_ascii=False, indent=2))


@main.command("get")
@click.argument("doc_id")
@click.option("--documents-path", default="./documents", help="Path to store documents")
def get_command(doc_id: str, documents_path: str):
    """Print a stored document"""
    store = FileDocumentStore(documents_path)
    try:
        click.echo(store.fetch_document_json(doc_id))
    except DocumentNotFound:
        raise click.ClickException(f"Document not found: {doc_id}")
    except ValueError as e:
        raise click.ClickException(str(e))


@main.command("put")
@click.argument("doc_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--documents-path", default="./documents", help="Path to store documents")
def put_command(doc_id: str, file: str, documents_path: str):
    """Store a document as canonical JSON"""
    document = _load_document(file)
    store = FileDocumentStore(documents_path)
    try:
        store.store_document_json(doc_id, codec.dumps(document))
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Stored {doc_id}: {len(document.content)} blocks")


if __name__ == "__main__":
    main()
