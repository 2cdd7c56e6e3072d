"""Tests for the service providers and the standalone sweep."""

import io

import pytest

from repobuilder.adapters.assetstore import LocalAssetStore
from repobuilder.adapters.id_generators import SequentialIdGenerator
from repobuilder.adapters.memory import InMemoryRepositoryData, InMemorySession
from repobuilder.adapters.sqlalchemy_adapters import SqlAlchemySession
from repobuilder.bootstrap import memory_services, sqlalchemy_services, sweep_storage
from repobuilder.builders import LeakDetectedError
from tests.fixtures.sqlite import sqlite_url

# pylint: disable=redefined-outer-name


class TestMemoryServices:
    """Tests for memory_services()."""

    @staticmethod
    def test_each_call_returns_fresh_handles_over_shared_data():
        """Handle sets differ but see the same records."""
        data = InMemoryRepositoryData()
        provider = memory_services(data)
        first, second = provider(), provider()
        assert first is not second

        with first.new_session() as session:
            community = first.communities.create(session, "Shared")
            session.commit()
        with second.new_session() as session:
            assert isinstance(session, InMemorySession)
            assert second.communities.find(session, community.id) == community

    @staticmethod
    def test_injected_id_generator_is_used():
        """Ids come from the given generator."""
        handles = memory_services(id_generator=SequentialIdGenerator())()
        with handles.new_session() as session:
            community = handles.communities.create(session, "One")
        assert community.id == "1".zfill(26)

    @staticmethod
    def test_assetstore_is_the_datas():
        """Bitstream bytes land in the data's asset store."""
        data = InMemoryRepositoryData()
        assert memory_services(data)().assetstore is data.assetstore


class TestSqlAlchemyServices:
    """Tests for sqlalchemy_services()."""

    @staticmethod
    def test_sessions_bind_to_the_engine(sqlite_engine_file, tmp_path):
        """new_session() opens SqlAlchemySessions on the given engine."""
        store = LocalAssetStore(tmp_path / "assets")
        handles = sqlalchemy_services(sqlite_engine_file, store)()
        with handles.new_session() as session:
            assert isinstance(session, SqlAlchemySession)
            assert session.engine is sqlite_engine_file
        assert handles.assetstore is store


class TestSweepStorage:
    """Tests for sweep_storage()."""

    @staticmethod
    def _seed(engine, store, *, delete: bool) -> str:
        handles = sqlalchemy_services(engine, store)()
        with handles.new_session() as session:
            bitstream = handles.bitstreams.create(
                session, io.BytesIO(b"left over"), name="left.txt"
            )
            if delete:
                handles.bitstreams.delete(session, bitstream)
            session.commit()
        return bitstream.id

    @staticmethod
    def test_clean_storage_reports_nothing(tmp_path, sqlite_engine_file):
        """An empty database sweeps clean."""
        report = sweep_storage(sqlite_url(tmp_path / "test.db"), tmp_path / "assets")
        assert report.clean

    def test_deleted_leftovers_are_purged(self, tmp_path, sqlite_engine_file):
        """Soft-deleted bitstreams are expunged without error."""
        store = LocalAssetStore(tmp_path / "assets")
        bitstream_id = self._seed(sqlite_engine_file, store, delete=True)

        report = sweep_storage(sqlite_url(tmp_path / "test.db"), store.root)

        assert report.purged == (bitstream_id,)
        assert list(store.digests()) == []

    def test_live_leftovers_raise_in_strict_mode(self, tmp_path, sqlite_engine_file):
        """Live bitstreams are purged, then reported as a leak."""
        store = LocalAssetStore(tmp_path / "assets")
        bitstream_id = self._seed(sqlite_engine_file, store, delete=False)

        with pytest.raises(LeakDetectedError) as excinfo:
            sweep_storage(sqlite_url(tmp_path / "test.db"), store.root)

        assert excinfo.value.bitstream_ids == (bitstream_id,)
        assert list(store.digests()) == []

    def test_live_leftovers_are_returned_when_lenient(self, tmp_path, sqlite_engine_file):
        """strict=False reports instead of raising."""
        store = LocalAssetStore(tmp_path / "assets")
        bitstream_id = self._seed(sqlite_engine_file, store, delete=False)

        report = sweep_storage(
            sqlite_url(tmp_path / "test.db"), store.root, strict=False
        )

        assert report.undeleted == (bitstream_id,)
