"""
Command surface for the note-taking application

Thin layer between a front end (CLI, desktop shell) and the store and
export pipeline. Every failure surfaces as a CommandError whose message
can be shown to the user directly.
"""

from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from ..models.formats import ExportFormat
from ..models.records import Collection, Document
from .errors import CommandError, ExportError, IOFailure, StoreError
from .exporter import markdown_export
from .log import LOG
from .pdf import PdfRenderer, pdf_available
from .store import Database


class Commands:
    """
    Application commands over one Database

    Args:
        database: Open document store
        renderer: PDF renderer used for PDF exports (default per export)
    """

    def __init__(self, database: Database, renderer: Optional[PdfRenderer] = None) -> None:
        self.database = database
        self.renderer = renderer

    def store_call(self, operation, *args):
        """Run a store operation, turning store failures into CommandError"""
        try:
            return operation(*args)
        except (StoreError, SQLAlchemyError) as e:
            raise CommandError(str(e)) from e

    # Collections

    def collections_get(self) -> List[Collection]:
        return self.store_call(self.database.collections_list)

    def collection_get(self, collection_id: int) -> Optional[Collection]:
        return self.store_call(self.database.collection_get, collection_id)

    def collection_create(self, name: str, description: Optional[str] = None) -> Collection:
        return self.store_call(self.database.collection_create, name, description)

    def collection_update(self, collection_id: int, name: str, description: Optional[str] = None) -> Collection:
        return self.store_call(self.database.collection_update, collection_id, name, description)

    def collection_delete(self, collection_id: int) -> bool:
        return self.store_call(self.database.collection_delete, collection_id)

    # Documents

    def documents_get(self, collection_id: int) -> List[Document]:
        return self.store_call(self.database.documents_list, collection_id)

    def document_get(self, document_id: int) -> Optional[Document]:
        return self.store_call(self.database.document_get, document_id)

    def document_create(self, collection_id: int, name: str, content: str) -> Document:
        return self.store_call(self.database.document_create, collection_id, name, content)

    def document_update(self, document_id: int, name: str, content: str) -> Document:
        return self.store_call(self.database.document_update, document_id, name, content)

    def document_delete(self, document_id: int) -> bool:
        return self.store_call(self.database.document_delete, document_id)

    # Export

    def pdf_check(self) -> bool:
        """Whether PDF export can be attempted (a browser engine is installed)"""
        return pdf_available()

    def document_export(self, document_id: int, format_token: str, output_path: Union[str, Path]) -> None:
        """
        Export a stored document to a file

        The format token is checked before the document is fetched, so an
        unsupported format never touches the store or the filesystem.

        Args:
            document_id: Document to export
            format_token: "html" or "pdf" (case-insensitive)
            output_path: Destination file; written only on success

        Raises:
            CommandError: With the user-facing failure message
        """
        try:
            export_format = ExportFormat.format_fromToken(format_token)
        except ExportError as e:
            raise CommandError(str(e)) from e

        document = self.document_get(document_id)
        if document is None:
            raise CommandError(f"Document {document_id} not found")

        try:
            output = markdown_export(document.content, export_format, self.renderer)
            output_write(output_path, output)
        except ExportError as e:
            raise CommandError(str(e)) from e

        LOG(f"Exported document {document_id} to {output_path}", level=1)


def output_write(output_path: Union[str, Path], output: bytes) -> None:
    """
    Write exported bytes to a file

    Raises:
        IOFailure: With the operating system's message
    """
    try:
        Path(output_path).write_bytes(output)
    except OSError as e:
        raise IOFailure(f"Failed to write file: {e}") from e
