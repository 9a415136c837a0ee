"""Tests for first-startup seeding."""

from docfolio.core.seeder import DEMO_EMAIL, seed_demo_data
from docfolio.models import Document, Folder, User
from docfolio.services import ListingService


class TestSeeder:

    def test_seeds_empty_database(self, db):
        seeded = seed_demo_data(db)
        assert seeded == db.query(Document).count() > 0
        user = db.query(User).filter(User.email == DEMO_EMAIL).one()
        assert db.query(Folder).filter(Folder.folders_user_id == user.id).count() > 0
        assert db.query(Document).filter(Document.folder_document_id.isnot(None)).count() > 0

    def test_is_idempotent(self, db):
        seed_demo_data(db)
        before = db.query(Document).count()
        assert seed_demo_data(db) == 0
        assert db.query(Document).count() == before

    def test_skips_when_users_exist(self, db, make):
        make.user()
        assert seed_demo_data(db) == 0
        assert db.query(Document).count() == 0

    def test_seeded_feed_lists_folders_first(self, db):
        seed_demo_data(db)
        user = db.query(User).one()
        rows = ListingService(db).list_combined(user.id, limit=100).rows
        kinds = [row.kind.value for row in rows]
        assert kinds == sorted(kinds, key=lambda k: 0 if k == "folder" else 1)
