"""
Local CSV readers and writers for Camtrap DP tables.

**Conceptual**: This module is the local-file I/O boundary for table data.
Reading opens a path as a binary stream and hands it to the codec; writing
opens (creates or truncates) a path and lets the codec encode into it.

**Error kinds**:
  - DataPackageIOError: the file cannot be opened, read or written
    (missing, permission denied, is a directory, ...). Wraps the OSError.
  - DecodeError: the file was read but its content is not a valid table.
  - TypeError / ValueError on write: a record cannot be encoded.

File handles are closed on every exit path, including errors.
"""

import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Union

from camtrap_dp.data.codec import encode_table
from camtrap_dp.data.records import Deployment, Medium, Observation
from camtrap_dp.data.schemas import (
    DEPLOYMENT_SCHEMA,
    MEDIUM_SCHEMA,
    OBSERVATION_SCHEMA,
    TableSchema,
)
from camtrap_dp.sources.base import read_table


logger = logging.getLogger(__name__)


class DataPackageIOError(Exception):
    """
    Raised when a local table file cannot be read or written.

    Distinct from DecodeError so callers can tell "bad environment" from
    "bad data". The underlying OSError is chained as `__cause__`.

    Attributes:
        path: The path involved.
    """

    def __init__(self, message: str, path: Union[Path, str, None] = None):
        super().__init__(message)
        self.path = path


class FileSource:
    """ByteSource over a local file."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    @contextmanager
    def open_stream(self) -> Iterator[BinaryIO]:
        try:
            handle = self.path.open("rb")
        except OSError as e:
            raise DataPackageIOError(
                f"{self.path}: cannot open for reading ({e.strerror or e}).",
                path=self.path,
            ) from e
        with handle:
            yield handle

    def describe(self) -> str:
        return str(self.path)


def read_table_csv(path: Union[Path, str], schema: TableSchema) -> list:
    """
    Read one table from a local CSV file.

    Args:
        path: Path to the CSV file (e.g. "data/deployments.csv").
        schema: Table schema to decode with.

    Returns:
        List of records of `schema.record_type`, in file order.

    Raises:
        DataPackageIOError: If the file cannot be opened or read.
        DecodeError: If the content does not conform to the schema.

    Example:
        >>> deployments = read_table_csv("data/deployments.csv", DEPLOYMENT_SCHEMA)
        >>> deployments[0].deployment_id
        '00a2c20d'
    """
    path = Path(path)
    try:
        records = read_table(FileSource(path), schema)
    except OSError as e:
        # read errors after a successful open
        raise DataPackageIOError(f"{path}: failed to read ({e}).", path=path) from e
    logger.info("Read %d %s records from %s", len(records), schema.name, path)
    return records


def write_table_csv(
    records: Iterable,
    path: Union[Path, str],
    schema: TableSchema,
) -> None:
    """
    Write one table to a local CSV file.

    **Functionally**:
      - Encodes every record in memory first; if a record cannot be
        encoded, an existing file at `path` is left as it was.
      - Creates missing parent directories.
      - Creates or truncates the file, writes the header and one row per
        record, flushes and closes it.

    Args:
        records: Records of `schema.record_type`.
        path: Destination path.
        schema: Table schema to encode with.

    Raises:
        DataPackageIOError: If the directory or file cannot be created or
                            written.
        TypeError, ValueError: If a record cannot be encoded.
    """
    path = Path(path)
    records = list(records)

    buffer = io.BytesIO()
    encode_table(records, buffer, schema)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            handle.write(buffer.getvalue())
            handle.flush()
    except OSError as e:
        raise DataPackageIOError(
            f"{path}: failed to write CSV ({e.strerror or e}).",
            path=path,
        ) from e
    logger.info("Wrote %d %s records to %s", len(records), schema.name, path)


def read_deployments_csv(path: Union[Path, str]) -> list[Deployment]:
    """Read a deployments table (e.g. deployments.csv)."""
    return read_table_csv(path, DEPLOYMENT_SCHEMA)


def read_media_csv(path: Union[Path, str]) -> list[Medium]:
    """Read a media table (e.g. media.csv)."""
    return read_table_csv(path, MEDIUM_SCHEMA)


def read_observations_csv(path: Union[Path, str]) -> list[Observation]:
    """Read an observations table (e.g. observations.csv)."""
    return read_table_csv(path, OBSERVATION_SCHEMA)


def write_deployments_csv(records: Iterable[Deployment], path: Union[Path, str]) -> None:
    write_table_csv(records, path, DEPLOYMENT_SCHEMA)


def write_media_csv(records: Iterable[Medium], path: Union[Path, str]) -> None:
    write_table_csv(records, path, MEDIUM_SCHEMA)


def write_observations_csv(records: Iterable[Observation], path: Union[Path, str]) -> None:
    write_table_csv(records, path, OBSERVATION_SCHEMA)
