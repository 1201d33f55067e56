"""
Document store tests

Tests the SQLite-backed collection and document store: first-run setup,
CRUD, ordering and cascading deletes.
"""

import pytest

from mdnotes.lib.errors import RecordNotFound
from mdnotes.lib.store import (
    DEFAULT_COLLECTION_DESCRIPTION,
    DEFAULT_COLLECTION_NAME,
    Database,
)


@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path / "data")
    yield db
    db.close()


class TestInitialisation:
    """First use of a data directory"""

    def test_database_file_created(self, tmp_path):
        """Data directory and database file are created on open"""
        db = Database(tmp_path / "nested" / "data")
        assert (tmp_path / "nested" / "data" / "markdown-ui.db").exists()
        db.close()

    def test_default_collection(self, database):
        """A fresh store has exactly the default collection"""
        collections = database.collections_list()
        assert len(collections) == 1
        assert collections[0].name == DEFAULT_COLLECTION_NAME
        assert collections[0].description == DEFAULT_COLLECTION_DESCRIPTION

    def test_reopen_does_not_duplicate_default(self, tmp_path):
        """Re-opening an existing store keeps a single default collection"""
        Database(tmp_path).close()
        db = Database(tmp_path)
        assert len(db.collections_list()) == 1
        db.close()

    def test_in_memory_url(self):
        """An explicit URL bypasses the data directory"""
        db = Database(url="sqlite://")
        assert db.collections_list()[0].name == DEFAULT_COLLECTION_NAME
        db.close()


class TestCollections:
    """Collection CRUD"""

    def test_create_and_get(self, database):
        collection = database.collection_create("Work", "Work notes")
        fetched = database.collection_get(collection.id)

        assert fetched is not None
        assert fetched.name == "Work"
        assert fetched.description == "Work notes"
        assert fetched.created_at is not None

    def test_newest_first(self, database):
        """Listing is ordered newest first"""
        first = database.collection_create("First")
        second = database.collection_create("Second")
        ids = [c.id for c in database.collections_list()]
        assert ids.index(second.id) < ids.index(first.id)

    def test_update(self, database):
        collection = database.collection_create("Old")
        updated = database.collection_update(collection.id, "New", "desc")
        assert updated.name == "New"
        assert database.collection_get(collection.id).description == "desc"

    def test_update_missing(self, database):
        with pytest.raises(RecordNotFound, match="Collection 999 not found"):
            database.collection_update(999, "x")

    def test_get_missing(self, database):
        assert database.collection_get(999) is None

    def test_delete_cascades_to_documents(self, database):
        """Deleting a collection removes its documents"""
        collection = database.collection_create("Doomed")
        document = database.document_create(collection.id, "note", "# hi")

        assert database.collection_delete(collection.id) is True
        assert database.collection_get(collection.id) is None
        assert database.document_get(document.id) is None

    def test_delete_missing(self, database):
        assert database.collection_delete(999) is False


class TestDocuments:
    """Document CRUD"""

    def test_create_and_get(self, database):
        collection = database.collections_list()[0]
        document = database.document_create(collection.id, "Notes", "# Notes\n\ntext\n")
        fetched = database.document_get(document.id)

        assert fetched.name == "Notes"
        assert fetched.content == "# Notes\n\ntext\n"
        assert fetched.collection_id == collection.id

    def test_create_in_missing_collection(self, database):
        with pytest.raises(RecordNotFound):
            database.document_create(999, "orphan", "")

    def test_list_scoped_to_collection(self, database):
        """Documents are listed per collection, newest first"""
        a = database.collection_create("A")
        b = database.collection_create("B")
        first = database.document_create(a.id, "one", "")
        second = database.document_create(a.id, "two", "")
        database.document_create(b.id, "other", "")

        assert [d.id for d in database.documents_list(a.id)] == [second.id, first.id]

    def test_update(self, database):
        collection = database.collections_list()[0]
        document = database.document_create(collection.id, "draft", "old")
        database.document_update(document.id, "final", "new")

        fetched = database.document_get(document.id)
        assert fetched.name == "final"
        assert fetched.content == "new"
        assert fetched.updated_at >= fetched.created_at

    def test_update_missing(self, database):
        with pytest.raises(RecordNotFound, match="Document 42 not found"):
            database.document_update(42, "x", "y")

    def test_delete(self, database):
        collection = database.collections_list()[0]
        document = database.document_create(collection.id, "gone", "")
        assert database.document_delete(document.id) is True
        assert database.document_get(document.id) is None
        assert database.document_delete(document.id) is False
