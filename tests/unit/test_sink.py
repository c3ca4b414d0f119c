"""
Unit Tests - Parquet Sink
"""
import os
import stat
from datetime import date

import pytest
import polars as pl
from polars.testing import assert_frame_equal

from gosales_etl.exceptions import WriteError
from gosales_etl.storage import ParquetSink


@pytest.fixture
def frame() -> pl.DataFrame:
    return pl.DataFrame({
        "order_number": [1, 2, 3],
        "ord_date": [date(2005, 8, 15), None, date(2008, 1, 1)],
        "fin_year": ["FY_05_06", "other", "other"],
        "revenue": [25.0, 30.0, None],
    })


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


class TestParquetSink:
    """Tests for ParquetSink"""

    def test_round_trip(self, tmp_path, frame):
        """Columns, order, dtypes and nulls survive a write/read"""
        sink = ParquetSink()
        path = sink.write(frame, tmp_path / "out.parquet")

        assert_frame_equal(sink.read(path), frame)

    def test_overwrite_replaces_artifact(self, tmp_path, frame):
        """A second write fully replaces the first"""
        sink = ParquetSink(compression="snappy")
        target = tmp_path / "out.parquet"
        sink.write(frame, target)

        sink.write(frame.head(1), target)

        assert sink.read(target).height == 1

    def test_no_temp_files_left(self, tmp_path, frame):
        """Only the artifact remains in the directory"""
        ParquetSink().write(frame, tmp_path / "out.parquet")

        assert [p.name for p in tmp_path.iterdir()] == ["out.parquet"]

    def test_missing_directory(self, tmp_path, frame):
        """The destination directory is not created"""
        target = tmp_path / "missing" / "out.parquet"

        with pytest.raises(WriteError) as exc_info:
            ParquetSink().write(frame, target)

        assert exc_info.value.stage == "persist"
        assert exc_info.value.context["path"] == str(target)
        assert not target.parent.exists()

    def test_failed_write_keeps_previous_artifact(self, tmp_path, frame, monkeypatch):
        """A failure during replace leaves the old file and no temp file"""
        sink = ParquetSink()
        target = tmp_path / "out.parquet"
        sink.write(frame, target)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("gosales_etl.storage.sink.os.replace", fail_replace)

        with pytest.raises(WriteError) as exc_info:
            sink.write(frame.head(1), target)

        assert exc_info.value.context["cause"] == "OSError"
        assert [p.name for p in tmp_path.iterdir()] == ["out.parquet"]
        assert_frame_equal(sink.read(target), frame)


class TestArtifactMode:
    """Tests for the permissions of the written artifact"""

    def test_new_artifact_follows_umask(self, tmp_path, frame, umask_022):
        """A new artifact is readable by others, like any file created under the umask"""
        target = ParquetSink().write(frame, tmp_path / "out.parquet")

        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_overwrite_keeps_existing_mode(self, tmp_path, frame, umask_022):
        """Replacing an artifact keeps the permissions it had"""
        sink = ParquetSink()
        target = sink.write(frame, tmp_path / "out.parquet")
        os.chmod(target, 0o640)

        sink.write(frame.head(1), target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o640
        assert sink.read(target).height == 1
