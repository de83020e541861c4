import json
import tempfile
import unittest
from pathlib import Path

from media_catalog.services.media_service import add_review, create_media, update_media
from media_catalog.services.record_store import JsonRecordStore, StorageError

RAW_COLLECTION = [
    {
        "imdbID": "tt1160419",
        "Title": "Dune",
        "Year": "2021",
        "Type": "movie",
        "Poster": "",
        "category": "scifi",
        "Runtime": 155,
        "createdAt": "2021-03-05T10:00:00.000Z",
        "updatedAt": "2021-03-06T08:15:42.123Z",
        "reviews": [
            {
                "_id": "r1",
                "rate": 5,
                "comment": "great",
                "elapsed": "2h",
                "createdAt": "2021-03-05T10:00:00.123Z",
                "updatedAt": "2021-03-07T00:00:00.000Z",
            },
        ],
    },
    {
        "imdbID": "tt0903747",
        "Title": "Breaking Bad",
        "Year": 2008,
        "Type": "series",
        "Poster": "https://cdn/bb.jpg",
        "createdAt": "Fri Mar 05 2021 10:00:00 GMT+0000",
        "reviews": [],
    },
]


class TestJsonRecordStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.path = self.dir / "media.json"
        self.store = JsonRecordStore(self.path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write_raw(self, content: str) -> None:
        self.path.write_text(content, encoding="utf-8")

    def test_missing_file_is_empty_collection(self) -> None:
        self.assertEqual(self.store.load(), [])

    def test_round_trip_is_field_for_field(self) -> None:
        self._write_raw(json.dumps(RAW_COLLECTION))

        self.store.save(self.store.load())

        saved = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(saved, RAW_COLLECTION)

    def test_round_trip_with_timestamps(self) -> None:
        collection, _ = create_media([], {"Title": "Dune", "Year": "2021", "Type": "movie"})
        self.store.save(collection)
        first = [entry.to_record() for entry in self.store.load()]

        self.store.save(self.store.load())
        second = [entry.to_record() for entry in self.store.load()]

        self.assertEqual(first, second)
        self.assertEqual(first, [entry.to_record() for entry in collection])

    def test_save_creates_parent_directories(self) -> None:
        store = JsonRecordStore(self.dir / "nested" / "deeper" / "media.json")
        store.save([])
        self.assertEqual(store.load(), [])

    def test_save_leaves_no_temp_files(self) -> None:
        self._write_raw(json.dumps(RAW_COLLECTION))
        self.store.save(self.store.load())
        self.assertEqual(sorted(p.name for p in self.dir.iterdir()), ["media.json"])

    def test_invalid_json_raises(self) -> None:
        self._write_raw("[{not json")
        with self.assertRaises(StorageError):
            self.store.load()

    def test_non_list_raises(self) -> None:
        self._write_raw(json.dumps({"media": []}))
        with self.assertRaises(StorageError):
            self.store.load()

    def test_record_without_id_raises(self) -> None:
        self._write_raw(json.dumps([{"Title": "Dune"}]))
        with self.assertRaises(StorageError):
            self.store.load()

    def test_unwritable_target_raises_and_cleans_up(self) -> None:
        self.path.mkdir()
        with self.assertRaises(StorageError):
            self.store.save([])
        self.assertEqual(sorted(p.name for p in self.dir.iterdir()), ["media.json"])

    def test_non_iso_timestamp_loads_verbatim(self) -> None:
        self._write_raw(json.dumps(RAW_COLLECTION))

        collection = self.store.load()

        self.assertEqual(collection[1].created_at, "Fri Mar 05 2021 10:00:00 GMT+0000")

    def test_concurrent_saves_last_writer_wins(self) -> None:
        self._write_raw(json.dumps(RAW_COLLECTION))
        first_snapshot = self.store.load()
        second_snapshot = self.store.load()

        renamed, _ = update_media(
            first_snapshot,
            "tt1160419",
            {"Title": "Dune: Part One", "Year": "2021", "Type": "movie"},
        )
        reviewed, _ = add_review(second_snapshot, "tt0903747", {"rate": 5, "comment": "classic"})
        self.store.save(renamed)
        self.store.save(reviewed)

        persisted = self.store.load()
        self.assertEqual(persisted[0].title, "Dune")
        self.assertEqual(len(persisted[1].reviews), 1)
        self.assertEqual(
            [entry.to_record() for entry in persisted],
            [entry.to_record() for entry in reviewed],
        )
