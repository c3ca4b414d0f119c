"""
Parquet Sink

Persists the finalized sales table as a single parquet artifact.

The file is written next to its destination under a temporary name and
moved into place with os.replace, so readers see either the previous
artifact or the complete new one. The artifact keeps the mode of the file it
replaces; a new one gets 0666 minus the umask.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import polars as pl
import structlog

from gosales_etl.exceptions import WriteError

logger = structlog.get_logger(__name__)


def _artifact_mode(path: Path) -> int:
    """Mode of the artifact being replaced, else the default for a new file under the umask"""
    if path.exists():
        return path.stat().st_mode & 0o777
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class ParquetSink:
    """
    Atomic parquet writer.

    Example:
        sink = ParquetSink(compression="zstd")
        sink.write(df, "data/curated/gosales.parquet")
    """

    def __init__(self, compression: str = "zstd"):
        self.compression = compression

    def write(self, df: pl.DataFrame, path: Union[str, Path]) -> Path:
        """
        Write df to path, replacing any existing artifact.

        The parent directory must already exist.

        Raises:
            WriteError: On any filesystem or serialization failure
        """
        path = Path(path)
        tmp_path: Optional[Path] = None

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.",
                suffix=".tmp",
                dir=path.parent,
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as fh:
                df.write_parquet(fh, compression=self.compression)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, _artifact_mode(path))
            os.replace(tmp_path, path)
        except (OSError, pl.exceptions.PolarsError) as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise WriteError(
                f"Failed to write {path}: {e}",
                path=str(path),
                cause=type(e).__name__,
            ) from e

        logger.info(
            f"Written {len(df)} rows to {path}",
            path=str(path),
            columns=df.width,
            compression=self.compression,
        )
        return path

    def read(self, path: Union[str, Path]) -> pl.DataFrame:
        """Read a written artifact back"""
        return pl.read_parquet(path)
