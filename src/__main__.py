#!/usr/bin/env python3
"""
mdnotes - Markdown notes with HTML and PDF export

Command-line front end to the document store and the export pipeline.

Philosophy:
    - Markdown-first: documents are stored as the markdown you wrote
    - One pipeline: PDF is always rendered from the HTML export
    - Diagrams survive: ```mermaid fences reach the browser untouched

Usage:
    mdnotes [--dataDir DIR] [-v] <command> [options]

Examples:
    # List collections and their documents
    mdnotes collections
    mdnotes documents --collection 1

    # Add a markdown file to a collection
    mdnotes document-add --collection 1 --name "Notes" --inputFile notes.md

    # Export a stored document
    mdnotes export --document 3 --format pdf --output notes.pdf

    # Convert a markdown file without storing it
    mdnotes convert --inputFile README.md --format html --output README.html

    # Check whether PDF export is possible on this host
    mdnotes pdf-check
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from .config import appsettings
from .lib import Commands, Database, markdown_export, pdf_available, state_connectToLogger, __version__
from .lib.commands import output_write
from .lib.errors import CommandError, ExportError
from .models import ExportFormat, ExportState


parser = ArgumentParser(
    prog="mdnotes",
    description="mdnotes - Markdown notes with HTML and PDF export",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--dataDir",
    default=None,
    type=str,
    help="Application data directory. Defaults to MDNOTES_DATA_DIR",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

subparsers = parser.add_subparsers(dest="command", required=True)

subparsers.add_parser("collections", help="List collections")

collection_add = subparsers.add_parser("collection-add", help="Create a collection")
collection_add.add_argument("--name", required=True, type=str, help="Collection name")
collection_add.add_argument("--description", default=None, type=str, help="Optional description")

documents = subparsers.add_parser("documents", help="List documents in a collection")
documents.add_argument("--collection", required=True, type=int, help="Collection id")

document_add = subparsers.add_parser("document-add", help="Store a markdown file as a document")
document_add.add_argument("--collection", required=True, type=int, help="Collection id")
document_add.add_argument("--name", required=True, type=str, help="Document name")
document_add.add_argument("--inputFile", required=True, type=str, help="Markdown file to store")

export = subparsers.add_parser("export", help="Export a stored document")
export.add_argument("--document", required=True, type=int, help="Document id")
export.add_argument("--format", required=True, type=str, help="Export format (html, pdf)")
export.add_argument("--output", required=True, type=str, help="Output file path")

convert = subparsers.add_parser("convert", help="Export a markdown file without storing it")
convert.add_argument("--inputFile", required=True, type=str, help="Markdown file to convert")
convert.add_argument("--format", required=True, type=str, help="Export format (html, pdf)")
convert.add_argument("--output", required=True, type=str, help="Output file path")

subparsers.add_parser("pdf-check", help="Report whether PDF export is available")


def fail(message: str) -> None:
    """Report an error and exit"""
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def commands_open(options: Namespace) -> Commands:
    """Open the store in the configured data directory"""
    return Commands(Database(options.dataDir))


def collections_show(options: Namespace) -> None:
    for collection in commands_open(options).collections_get():
        description = f" - {collection.description}" if collection.description else ""
        print(f"{collection.id:>4}  {collection.name}{description}")


def collection_add_run(options: Namespace) -> None:
    collection = commands_open(options).collection_create(options.name, options.description)
    print(f"Created collection {collection.id}: {collection.name}")


def documents_show(options: Namespace) -> None:
    for document in commands_open(options).documents_get(options.collection):
        print(f"{document.id:>4}  {document.name}  ({document.updated_at:%Y-%m-%d %H:%M})")


def document_add_run(options: Namespace) -> None:
    try:
        content = Path(options.inputFile).read_text(encoding="utf-8")
    except OSError as e:
        fail(f"Error reading input file: {e}")
    document = commands_open(options).document_create(options.collection, options.name, content)
    print(f"Created document {document.id}: {document.name}")


def export_run(options: Namespace) -> None:
    commands_open(options).document_export(options.document, options.format, options.output)
    print(f"Wrote {options.output}")


def convert_run(options: Namespace) -> None:
    """Format is parsed before the input file is read"""
    export_format = ExportFormat.format_fromToken(options.format)
    try:
        source = Path(options.inputFile).read_text(encoding="utf-8")
    except OSError as e:
        fail(f"Error reading input file: {e}")
    output_write(options.output, markdown_export(source, export_format))
    print(f"Wrote {options.output}")


def pdf_check_run(options: Namespace) -> None:
    if pdf_available():
        print("PDF export available")
    else:
        print("PDF export unavailable: install a Chromium-family browser")
        sys.exit(1)


HANDLERS = {
    "collections": collections_show,
    "collection-add": collection_add_run,
    "documents": documents_show,
    "document-add": document_add_run,
    "export": export_run,
    "convert": convert_run,
    "pdf-check": pdf_check_run,
}


def main(argv=None) -> None:
    """
    Main entry point - dispatch one command.

    Args:
        argv: Argument list (defaults to sys.argv[1:])
    """
    options: Namespace = parser.parse_args(argv)
    appsettings.verbosity = options.verbosity
    state_connectToLogger(ExportState(verbosity=options.verbosity))

    try:
        HANDLERS[options.command](options)
    except (CommandError, ExportError) as e:
        fail(str(e))


if __name__ == "__main__":
    main()
