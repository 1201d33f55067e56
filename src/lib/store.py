"""
Local document store

SQLAlchemy over a SQLite file in the application data directory. Holds
collections and their documents; the exporter only ever reads a document's
`content`.
"""

from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..config import appsettings
from ..models.records import Base, Collection, Document, utcnow
from .errors import RecordNotFound
from .log import LOG


DEFAULT_COLLECTION_NAME = "Default Collection"
DEFAULT_COLLECTION_DESCRIPTION = "Your default collection of documents"


def _foreignKeys_enable(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Keyed-record store for collections and documents

    Records returned from any method are detached from their session and
    safe to read after the call returns.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None, url: Optional[str] = None) -> None:
        """
        Open (and initialise if needed) the database

        Args:
            data_dir: Application data directory; created if missing.
                      Defaults to MDNOTES_DATA_DIR
            url: Explicit SQLAlchemy URL (e.g., "sqlite://" for in-memory);
                 overrides data_dir
        """
        if url is None:
            if data_dir:
                path = Path(data_dir) / appsettings.database_name
            else:
                path = appsettings.databasePath_get()
            path.parent.mkdir(parents=True, exist_ok=True)
            url = f"sqlite:///{path}"

        self.url = url
        self.engine: Engine = create_engine(url)
        event.listen(self.engine, "connect", _foreignKeys_enable)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)

        self.init()

    def init(self) -> None:
        """Create tables and the default collection on first use"""
        Base.metadata.create_all(self.engine)

        with self.Session() as session:
            count = session.scalar(select(func.count()).select_from(Collection))
            if not count:
                session.add(Collection(
                    name=DEFAULT_COLLECTION_NAME,
                    description=DEFAULT_COLLECTION_DESCRIPTION,
                ))
                session.commit()
                LOG("Created default collection", level=2)

    # Collections

    def collections_list(self) -> List[Collection]:
        """All collections, newest first"""
        with self.Session() as session:
            query = select(Collection).order_by(Collection.created_at.desc(), Collection.id.desc())
            return list(session.scalars(query))

    def collection_get(self, collection_id: int) -> Optional[Collection]:
        """Collection by id, or None"""
        with self.Session() as session:
            return session.get(Collection, collection_id)

    def collection_create(self, name: str, description: Optional[str] = None) -> Collection:
        """Insert a collection and return it"""
        with self.Session() as session:
            collection = Collection(name=name, description=description)
            session.add(collection)
            session.commit()
            LOG(f"Created collection {collection.id}: {name}", level=2)
            return collection

    def collection_update(self, collection_id: int, name: str, description: Optional[str] = None) -> Collection:
        """
        Replace a collection's name and description

        Raises:
            RecordNotFound: If no collection has this id
        """
        with self.Session() as session:
            collection = session.get(Collection, collection_id)
            if collection is None:
                raise RecordNotFound(f"Collection {collection_id} not found")
            collection.name = name
            collection.description = description
            collection.updated_at = utcnow()
            session.commit()
            return collection

    def collection_delete(self, collection_id: int) -> bool:
        """
        Delete a collection and all its documents

        Returns:
            True if the collection existed
        """
        with self.Session() as session:
            collection = session.get(Collection, collection_id)
            if collection is None:
                return False
            session.delete(collection)
            session.commit()
            LOG(f"Deleted collection {collection_id}", level=2)
            return True

    # Documents

    def documents_list(self, collection_id: int) -> List[Document]:
        """Documents of one collection, newest first"""
        with self.Session() as session:
            query = (
                select(Document)
                .where(Document.collection_id == collection_id)
                .order_by(Document.created_at.desc(), Document.id.desc())
            )
            return list(session.scalars(query))

    def document_get(self, document_id: int) -> Optional[Document]:
        """Document by id, or None"""
        with self.Session() as session:
            return session.get(Document, document_id)

    def document_create(self, collection_id: int, name: str, content: str) -> Document:
        """
        Insert a document into a collection

        Raises:
            RecordNotFound: If the collection does not exist
        """
        with self.Session() as session:
            if session.get(Collection, collection_id) is None:
                raise RecordNotFound(f"Collection {collection_id} not found")
            document = Document(collection_id=collection_id, name=name, content=content)
            session.add(document)
            session.commit()
            LOG(f"Created document {document.id}: {name}", level=2)
            return document

    def document_update(self, document_id: int, name: str, content: str) -> Document:
        """
        Replace a document's name and content

        Raises:
            RecordNotFound: If no document has this id
        """
        with self.Session() as session:
            document = session.get(Document, document_id)
            if document is None:
                raise RecordNotFound(f"Document {document_id} not found")
            document.name = name
            document.content = content
            document.updated_at = utcnow()
            session.commit()
            return document

    def document_delete(self, document_id: int) -> bool:
        """
        Delete a document

        Returns:
            True if the document existed
        """
        with self.Session() as session:
            document = session.get(Document, document_id)
            if document is None:
                return False
            session.delete(document)
            session.commit()
            return True

    def close(self) -> None:
        """Release pooled connections"""
        self.engine.dispose()
