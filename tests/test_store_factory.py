"""Tests for the revkv.adapter() factory function."""

import shutil
import tempfile

import pytest

from revkv import INDEX_DOC, Adapter, BulkOperation, Disk, Memory, Settings, adapter


@pytest.fixture
def tmpdir():
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path, ignore_errors=True)


class TestAdapterFactory:
    def test_default_is_memory(self):
        db = adapter()
        assert isinstance(db, Adapter)
        assert isinstance(db.store, Memory)

    def test_runs_init(self):
        db = adapter()
        assert db.store.get_system_doc(INDEX_DOC) == {"filters": {}}

    def test_skip_init(self):
        db = adapter(init=False)
        assert db.store.get_system_doc(INDEX_DOC) is None

    def test_invalid_storage(self):
        with pytest.raises(ValueError, match="Unknown storage"):
            adapter(storage="redis")  # type: ignore[arg-type]

    def test_disk_requires_path(self):
        with pytest.raises(ValueError, match="path is required"):
            adapter(storage="disk")

    def test_settings_mapping(self):
        db = adapter(settings={"database": "pads", "writeInterval": 10})
        assert db.settings == Settings(database="pads", write_interval=10)

    def test_settings_instance(self):
        settings = Settings(cache=5)
        assert adapter(settings=settings).settings is settings


class TestAdapterFactoryDisk:
    def test_disk_round_trip(self, tmpdir):
        db = adapter(storage="disk", path=tmpdir)
        assert isinstance(db.store, Disk)
        db.set("greeting", "hello")
        db.do_bulk([BulkOperation.set("user_1", 1), BulkOperation.remove("greeting")])
        assert db.get("greeting") is None
        assert db.find_keys("user") == ["user_1"]
        db.close()
        db.store.close()

    def test_disk_index_survives_reopen(self, tmpdir):
        db = adapter(storage="disk", path=tmpdir)
        db.set("user_1", 1)
        db.set("admin_1", 2)
        assert db.find_keys("_1", "admin") == ["user_1"]
        db.store.close()

        db2 = adapter(storage="disk", path=tmpdir)
        try:
            assert len(db2.indexes.definitions()) == 1
            assert db2.find_keys("_1", "admin") == ["user_1"]
            assert len(db2.indexes.definitions()) == 1
        finally:
            db2.store.close()

    def test_disk_keeps_every_document(self, tmpdir):
        db = adapter(storage="disk", path=tmpdir)
        try:
            for i in range(30):
                db.set(f"k{i}", i)
            assert [db.get(f"k{i}") for i in range(30)] == list(range(30))
            assert db.store.get_system_doc(INDEX_DOC) == {"filters": {}}
            assert len(db.find_keys(r"^k\d+$")) == 30
        finally:
            db.store.close()
