"""
Reading tables from HTTP(S) URLs.

**Conceptual**: UrlSource adapts HttpClient to the ByteSource protocol: the
whole resource is fetched with one blocking GET, buffered in memory, and then
decoded exactly like a local file. No streaming, no partial content, no retry.

Unless a client is injected, each fetch uses a fresh HttpClient (and so a
fresh connection) that is closed before the call returns.
"""

import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from camtrap_dp.config.settings import HttpSettings, get_settings
from camtrap_dp.data.records import Deployment, Medium, Observation
from camtrap_dp.data.schemas import (
    DEPLOYMENT_SCHEMA,
    MEDIUM_SCHEMA,
    OBSERVATION_SCHEMA,
    TableSchema,
)
from camtrap_dp.sources.base import read_table
from camtrap_dp.sources.http_client import HttpClient


logger = logging.getLogger(__name__)


class UrlSource:
    """
    ByteSource over a remote resource.

    Args:
        url: http:// or https:// URL of the CSV resource.
        settings: HTTP settings; defaults to get_settings().http.
        client: Optional pre-configured HttpClient (for testing/DI). An
                injected client is used as-is and not closed.
    """

    def __init__(
        self,
        url: str,
        settings: Optional[HttpSettings] = None,
        client: Optional[HttpClient] = None,
    ):
        self.url = url
        self.settings = settings
        self.client = client

    def fetch(self) -> bytes:
        if self.client is not None:
            return self.client.fetch_bytes(self.url)
        settings = self.settings if self.settings is not None else get_settings().http
        with HttpClient(settings) as client:
            return client.fetch_bytes(self.url)

    @contextmanager
    def open_stream(self) -> Iterator[BinaryIO]:
        with io.BytesIO(self.fetch()) as stream:
            yield stream

    def describe(self) -> str:
        return self.url


def fetch_table_csv(
    url: str,
    schema: TableSchema,
    settings: Optional[HttpSettings] = None,
    client: Optional[HttpClient] = None,
) -> list:
    """
    Fetch one table from a URL and decode it.

    Args:
        url: URL of the CSV resource.
        schema: Table schema to decode with.
        settings: Optional HTTP settings (timeout, user agent).
        client: Optional HttpClient to use instead of a fresh one.

    Returns:
        List of records of `schema.record_type`.

    Raises:
        FetchError: (or a subclass) if the resource cannot be fetched.
        DecodeError: If the content does not conform to the schema.
        ValueError: If the URL is empty or not http(s).

    Example:
        >>> url = "https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example/deployments.csv"
        >>> len(fetch_table_csv(url, DEPLOYMENT_SCHEMA))
        4
    """
    records = read_table(UrlSource(url, settings=settings, client=client), schema)
    logger.info("Fetched %d %s records from %s", len(records), schema.name, url)
    return records


def fetch_deployments_csv(url: str, **kwargs) -> list[Deployment]:
    """Fetch a deployments table. Keyword arguments go to fetch_table_csv."""
    return fetch_table_csv(url, DEPLOYMENT_SCHEMA, **kwargs)


def fetch_media_csv(url: str, **kwargs) -> list[Medium]:
    """Fetch a media table. Keyword arguments go to fetch_table_csv."""
    return fetch_table_csv(url, MEDIUM_SCHEMA, **kwargs)


def fetch_observations_csv(url: str, **kwargs) -> list[Observation]:
    """Fetch an observations table. Keyword arguments go to fetch_table_csv."""
    return fetch_table_csv(url, OBSERVATION_SCHEMA, **kwargs)
