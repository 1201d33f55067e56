"""
Storage models for collections and documents

SQLAlchemy declarative models backing the local SQLite store. A document
belongs to exactly one collection and is removed with it.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores no zone)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Collection(Base):
    """
    Named group of documents.

    Deleting a collection cascades to its documents, both through the ORM
    relationship and the ON DELETE CASCADE foreign key.
    """
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    documents = relationship(
        "Document",
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Collection {self.id}: {self.name}>"


class Document(Base):
    """
    Markdown document. `content` is the raw markdown fed to the exporter.
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection_id = Column(
        Integer, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    collection = relationship("Collection", back_populates="documents")

    __table_args__ = (
        Index("idx_documents_collection", "collection_id"),
    )

    def __repr__(self):
        return f"<Document {self.id}: {self.name} (collection {self.collection_id})>"
