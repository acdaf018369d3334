"""
===========================================================================
test_database.py — Tests for the Record Store Backends
===========================================================================

PURPOSE:
    Runs the same checks against MemoryStorage and SQLiteStorage so both
    backends keep honouring the RecordStore contract.

    The SQLite tests use a throwaway file in a temporary folder.
===========================================================================
"""

import os
import sqlite3
import tempfile
import threading
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

from pydantic import ValidationError

from database import IdSequence, MemoryStorage, SQLiteStorage, create_storage
from schemas import ChartDescriptor, ChartSeries, ConversationCreate, LocationCreate, QueryCreate

FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0)


class TestIdSequence(unittest.TestCase):

    def test_counts_up_from_start(self):
        seq = IdSequence()
        self.assertEqual([seq.next(), seq.next(), seq.next()], [1, 2, 3])
        self.assertEqual(IdSequence(start=10).next(), 10)

    def test_no_duplicates_across_threads(self):
        seq = IdSequence()
        seen = []
        lock = threading.Lock()

        def worker():
            for _ in range(200):
                value = seq.next()
                with lock:
                    seen.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(sorted(seen), list(range(1, 1601)))


class RecordStoreContract:
    """Mixin: subclasses provide make_storage()."""

    def make_storage(self):
        raise NotImplementedError

    def setUp(self):
        self.storage = self.make_storage()

    def test_location_round_trip(self):
        created = self.storage.create_location(LocationCreate(
            name="San Francisco", latitude="37.7749", longitude="-122.4194", type="auto"
        ))
        self.assertEqual(created.id, 1)
        self.assertEqual(created.created_at, FIXED_TIME)
        self.assertEqual(self.storage.get_location(created.id), created)

    def test_returned_records_are_read_only(self):
        location = self.storage.create_location(LocationCreate(name="London", type="manual"))
        with self.assertRaises(ValidationError):
            self.storage.get_location(location.id).name = "Hacked"
        self.assertEqual(self.storage.get_location(location.id).name, "London")

        conv = self.storage.create_conversation(ConversationCreate(location_id=1, session_id="s"))
        with self.assertRaises(ValidationError):
            conv.session_id = "other"

    def test_changing_returned_params_does_not_touch_store(self):
        params = {"dataTypes": ["rainfall"]}
        chart = ChartDescriptor(type="bar", labels=["Jan"], series=[ChartSeries(label="x", values=[1.0])])
        created = self.storage.create_query(QueryCreate(
            location_id=1, prompt="rain", extracted_params=params, visualization_data=chart
        ))
        params["dataTypes"].append("temperature")
        chart.labels.append("Feb")
        created.extracted_params["aggregation"] = "average"
        self.storage.get_query(created.id).extracted_params["dataTypes"].append("population")
        self.storage.get_queries_by_location(1)[0].visualization_data.series[0].values.append(9.0)

        stored = self.storage.get_query(created.id)
        self.assertEqual(stored.extracted_params, {"dataTypes": ["rainfall"]})
        self.assertEqual(stored.visualization_data.labels, ["Jan"])
        self.assertEqual(stored.visualization_data.series[0].values, [1.0])

    def test_missing_records_are_none(self):
        self.assertIsNone(self.storage.get_location(42))
        self.assertIsNone(self.storage.get_query(42))

    def test_ids_increase_per_kind(self):
        a = self.storage.create_location(LocationCreate(name="A", type="map"))
        b = self.storage.create_location(LocationCreate(name="B", type="map"))
        conv = self.storage.create_conversation(ConversationCreate(location_id=a.id, session_id="s1"))
        self.assertEqual((a.id, b.id), (1, 2))
        self.assertEqual(conv.id, 1)

    def test_queries_filtered_by_location(self):
        chart = ChartDescriptor(type="bar", labels=["Jan"], series=[ChartSeries(label="x", values=[1.5])])
        self.storage.create_query(QueryCreate(
            location_id=1, prompt="rain", extracted_params={"dataTypes": ["rainfall"]},
            response="<div/>", visualization_data=chart
        ))
        self.storage.create_query(QueryCreate(location_id=2, prompt="other"))
        self.storage.create_query(QueryCreate(location_id=1, prompt="again"))

        queries = self.storage.get_queries_by_location(1)
        self.assertEqual(sorted(q.prompt for q in queries), ["again", "rain"])
        self.assertEqual(self.storage.get_queries_by_location(3), [])

        stored = self.storage.get_query(1)
        self.assertEqual(stored.extracted_params, {"dataTypes": ["rainfall"]})
        self.assertEqual(stored.visualization_data, chart)
        self.assertIsNone(self.storage.get_query(2).visualization_data)

    def test_conversations_filtered_by_session(self):
        self.storage.create_conversation(ConversationCreate(location_id=1, session_id="abc"))
        self.storage.create_conversation(ConversationCreate(location_id=2, session_id="xyz"))
        self.storage.create_conversation(ConversationCreate(location_id=3, session_id="abc"))

        found = self.storage.get_conversations_by_session("abc")
        self.assertEqual(sorted(c.location_id for c in found), [1, 3])
        self.assertEqual(self.storage.get_conversations_by_session("nope"), [])


class TestMemoryStorage(RecordStoreContract, unittest.TestCase):

    def make_storage(self):
        return MemoryStorage(clock=lambda: FIXED_TIME)

    def test_injected_sequence_is_used(self):
        storage = MemoryStorage(sequence_factory=lambda: IdSequence(start=100))
        location = storage.create_location(LocationCreate(name="A", type="manual"))
        self.assertEqual(location.id, 100)


class TestSQLiteStorage(RecordStoreContract, unittest.TestCase):

    def make_storage(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        return SQLiteStorage(os.path.join(self.tmpdir.name, "test.db"), clock=lambda: FIXED_TIME)

    def test_data_survives_a_new_store_instance(self):
        self.storage.create_location(LocationCreate(name="Kept", type="manual"))
        reopened = SQLiteStorage(self.storage.db_path)
        self.assertEqual(reopened.get_location(1).name, "Kept")

    def test_init_db_closes_connection_when_create_fails(self):
        conn = MagicMock()
        conn.cursor.return_value.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        with patch.object(SQLiteStorage, "get_db_connection", return_value=conn):
            with self.assertRaises(sqlite3.OperationalError):
                SQLiteStorage(os.path.join(self.tmpdir.name, "broken.db"))
        conn.close.assert_called_once_with()
        conn.commit.assert_not_called()


class TestCreateStorage(unittest.TestCase):

    def test_memory_is_default(self):
        self.assertIsInstance(create_storage({}), MemoryStorage)

    def test_sqlite_backend(self):
        with tempfile.TemporaryDirectory() as tmp:
            storage = create_storage({"storage": {
                "backend": "sqlite", "db_path": os.path.join(tmp, "nested", "g.db")
            }})
            self.assertIsInstance(storage, SQLiteStorage)

    def test_unknown_backend_raises(self):
        with self.assertRaises(ValueError):
            create_storage({"storage": {"backend": "postgres"}})


if __name__ == "__main__":
    unittest.main()
