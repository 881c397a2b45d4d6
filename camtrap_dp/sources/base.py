"""
Base abstractions for byte sources.

**Conceptual**: This module defines the ByteSource protocol, the contract
between "where CSV bytes come from" and the codec that decodes them. A local
file, an HTTP(S) URL and an in-memory buffer all satisfy it, so table reading
logic is written once and tests can run without disk or network.

**Contract**: A ByteSource MUST:
  1. Open a fresh binary stream positioned at the start of the CSV content
     each time `open_stream()` is entered.
  2. Release the stream when the context exits, on success and on error.
  3. Raise its own transport error kind (DataPackageIOError for files,
     FetchError for URLs) rather than a DecodeError when the bytes cannot be
     obtained.
  4. Describe itself (`describe()`) for use in error messages.

Any class with these two methods is a ByteSource; no inheritance needed.
"""

import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, ContextManager, Iterator, Protocol

from camtrap_dp.data.codec import decode_table
from camtrap_dp.data.schemas import TableSchema


logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    """
    Protocol for anything that can supply CSV bytes.

    **Example usage**:
        >>> from camtrap_dp.data.schemas import DEPLOYMENT_SCHEMA
        >>> source = BytesSource(b"deploymentID,deploymentStart,deploymentEnd\\n")
        >>> read_table(source, DEPLOYMENT_SCHEMA)
        []
    """

    def open_stream(self) -> ContextManager[BinaryIO]:
        """Open a binary stream over the whole content."""
        ...

    def describe(self) -> str:
        """Short description (path, URL) used as error context."""
        ...


class BytesSource:
    """ByteSource over an in-memory bytes object."""

    def __init__(self, data: bytes, name: str = "<bytes>"):
        self.data = data
        self.name = name

    @contextmanager
    def open_stream(self) -> Iterator[BinaryIO]:
        with io.BytesIO(self.data) as stream:
            yield stream

    def describe(self) -> str:
        return self.name


def read_table(source: ByteSource, schema: TableSchema) -> list:
    """
    Read and decode one table from any ByteSource.

    Args:
        source: Where the CSV bytes come from.
        schema: Table schema to decode with.

    Returns:
        List of records of `schema.record_type`.

    Raises:
        DecodeError: If the content is malformed.
        Whatever transport error the source raises (DataPackageIOError,
        FetchError) if the bytes cannot be obtained.
    """
    context = source.describe()
    with source.open_stream() as stream:
        records = decode_table(stream, schema, context=context)
    logger.debug("Decoded %d %s records from %s", len(records), schema.name, context)
    return records
