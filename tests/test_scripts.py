import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

from tests.base import RecordStoreTestBase, topic_record
from kb.core.errors import StoreWriteError, ValidationError
from kb.models.topic_version import TopicVersion
from kb.models.user import User
from kb.scripts import import_json
from kb.scripts.import_json import import_legacy_database, snapshot_from_legacy
from kb.scripts.seed_topics import build_sample_snapshot, seed_sample
from kb.services import topics as topic_service


class SeedTopicsTests(RecordStoreTestBase):
    def test_sample_snapshot_has_three_levels(self):
        snapshot = build_sample_snapshot(40, now=datetime(2026, 3, 1, tzinfo=timezone.utc))
        self.assertEqual(len(snapshot.topics), 40)
        self.assertEqual(len(snapshot.users), 41)
        self.assertEqual(len(snapshot.resources), 40)
        self.assertEqual(snapshot.users[0].role, "Admin")
        self.assertEqual({r.type for r in snapshot.resources}, {"pdf", "video", "article"})

        parents = {t.id: t.parent_topic_id for t in snapshot.topics}
        self.assertIsNone(parents[1])
        self.assertEqual(parents[11], 1)
        self.assertEqual(parents[21], 1)
        self.assertEqual(parents[31], 21)

    def test_seed_writes_hierarchy_and_is_idempotent(self):
        self.assertTrue(seed_sample(self.store))
        self.assertEqual(self.db.query(TopicVersion).count(), 40)
        self.assertEqual(self.db.query(User).count(), 41)

        tree = topic_service.get_topic_tree(self.store, 1)
        self.assertEqual([c.id for c in tree.children], [11, 21])
        self.assertEqual([c.id for c in tree.children[1].children], [31])
        self.assertEqual(topic_service.get_shortest_path(self.store, 11, 31), [11, 1, 21, 31])

        topic_service.update_topic(self.store, 1, {"name": "Edited"})
        self.assertFalse(seed_sample(self.store))
        self.assertEqual(topic_service.get_topic(self.store, 1).name, "Edited")

    def test_seed_reset_replaces_existing_records(self):
        self._seed_topics(topic_record(99))
        self.assertTrue(seed_sample(self.store, size=5, reset=True))
        self.assertEqual([t.id for t in topic_service.list_topics(self.store)], [1, 2, 3, 4, 5])


class ImportJsonTests(RecordStoreTestBase):
    LEGACY = {
        "topics": [
            {
                "id": 1,
                "version": 0,
                "name": "Law",
                "content": "Root",
                "createdAt": "2025-01-10T08:00:00.000Z",
                "updatedAt": "2025-01-10T08:00:00.000Z",
                "parentTopicId": None,
            },
            {
                "id": 2,
                "version": 0,
                "name": "Contracts",
                "content": "Child",
                "description": "About contracts",
                "createdAt": "2025-01-11T08:00:00.000Z",
                "updatedAt": "2025-01-11T08:00:00.000Z",
                "parentTopicId": 1,
            },
            {
                "id": 2,
                "version": 1,
                "name": "Contracts law",
                "content": "Child",
                "createdAt": "2025-01-11T08:00:00.000Z",
                "updatedAt": "2025-01-12T08:00:00.000Z",
                "parentTopicId": 1,
            },
        ],
        "users": [
            {"id": 1, "name": "Admin", "email": "admin@example.com", "role": "Admin", "createdAt": "2025-01-01T00:00:00Z"}
        ],
        "resources": [
            {
                "id": 1,
                "topicId": 2,
                "url": "http://example.com/r1",
                "type": "pdf",
                "createdAt": "2025-01-12T00:00:00Z",
                "updatedAt": "2025-01-12T00:00:00Z",
            }
        ],
    }

    def test_snapshot_from_legacy_maps_camel_case_fields(self):
        snapshot = snapshot_from_legacy(self.LEGACY)
        self.assertEqual(len(snapshot.topics), 3)
        self.assertEqual(snapshot.topics[1].parent_topic_id, 1)
        self.assertEqual(snapshot.topics[0].description, "")
        self.assertEqual(snapshot.topics[0].created_at, datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(snapshot.resources[0].topic_id, 2)
        self.assertEqual(snapshot.resources[0].title, "")

    def test_import_replaces_store_contents(self):
        self._seed_topics(topic_record(50))
        import_legacy_database(self.store, self.LEGACY)

        listed = topic_service.list_topics(self.store)
        self.assertEqual([(t.id, t.version) for t in listed], [(1, 0), (2, 1)])
        self.assertEqual(topic_service.get_topic(self.store, 2).name, "Contracts law")
        self.assertEqual(topic_service.get_shortest_path(self.store, 2, 1), [2, 1])

        stored = topic_service.get_topic(self.store, 1)
        self.assertEqual(stored.created_at, datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc))

    def test_malformed_legacy_data_is_rejected(self):
        with self.assertRaises(ValidationError):
            snapshot_from_legacy([])
        with self.assertRaises(ValidationError):
            snapshot_from_legacy({"topics": [{"name": "no id"}]})
        with self.assertRaises(ValidationError):
            snapshot_from_legacy({"topics": [{"id": 1, "createdAt": "yesterday"}]})

    DUPLICATE_EMAILS = {
        "topics": [{"id": 1, "version": 0, "name": "Law", "content": "Root"}],
        "users": [
            {"id": 1, "name": "First", "email": "same@example.com"},
            {"id": 2, "name": "Second", "email": "same@example.com"},
        ],
    }

    def test_rejected_import_raises_and_writes_nothing(self):
        with self.assertLogs("kb.services.record_store", level="ERROR"):
            with self.assertRaises(StoreWriteError):
                import_legacy_database(self.store, self.DUPLICATE_EMAILS)

        self.assertEqual(self.db.query(TopicVersion).count(), 0)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_rejected_import_keeps_existing_records(self):
        self._seed_topics(topic_record(50))
        with self.assertLogs("kb.services.record_store", level="ERROR"):
            with self.assertRaises(StoreWriteError):
                import_legacy_database(self.store, self.DUPLICATE_EMAILS)

        self.assertEqual([t.id for t in topic_service.list_topics(self.store)], [50])

    def _run_cli(self, data):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "database.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            stdout, stderr = io.StringIO(), io.StringIO()
            with patch.object(import_json, "SessionLocal", self.SessionLocal), patch.object(
                import_json, "configure_logging"
            ), patch("sys.argv", ["kb-import-json", str(path)]), redirect_stdout(stdout), redirect_stderr(stderr):
                import_json.main()
        return stdout.getvalue(), stderr.getvalue()

    def test_cli_reports_success(self):
        stdout, _ = self._run_cli(self.LEGACY)
        self.assertIn("import done: topics=3, users=1, resources=1", stdout)
        self.assertEqual(self.db.query(TopicVersion).count(), 3)

    def test_cli_exits_non_zero_when_import_is_not_persisted(self):
        with self.assertLogs("kb.services.record_store", level="ERROR"):
            with self.assertRaises(SystemExit) as ctx:
                self._run_cli(self.DUPLICATE_EMAILS)
        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(self.db.query(User).count(), 0)


if __name__ == "__main__":
    unittest.main()
