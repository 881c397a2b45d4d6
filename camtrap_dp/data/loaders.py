"""
Whole-package convenience loaders.

**Conceptual**: A Camtrap DP stores its three tables as sibling resources
named deployments.csv, media.csv and observations.csv. This module resolves
those names under a local directory or a base URL and loads (or writes) all
three tables in one call, so callers don't hardcode file names.

Cross-table checks (e.g. every Medium.deployment_id naming a Deployment) are
left to the caller.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from camtrap_dp.config.settings import HttpSettings, get_settings
from camtrap_dp.data.io import read_table_csv, write_table_csv
from camtrap_dp.data.records import Deployment, Medium, Observation
from camtrap_dp.data.schemas import (
    DEPLOYMENT_SCHEMA,
    MEDIUM_SCHEMA,
    OBSERVATION_SCHEMA,
)
from camtrap_dp.sources.http_client import HttpClient
from camtrap_dp.sources.url_source import fetch_table_csv


logger = logging.getLogger(__name__)


# Table name -> resource file name
RESOURCE_FILENAMES = {
    DEPLOYMENT_SCHEMA.name: "deployments.csv",
    MEDIUM_SCHEMA.name: "media.csv",
    OBSERVATION_SCHEMA.name: "observations.csv",
}


@dataclass(frozen=True)
class DataPackageTables:
    """The three tables of one data package."""
    deployments: list[Deployment]
    media: list[Medium]
    observations: list[Observation]


def _resolve_directory(directory: Optional[Union[Path, str]]) -> Path:
    if directory is None:
        return get_settings().data_dir
    return Path(directory)


def resource_url(base_url: str, table: str) -> str:
    """
    Build the URL of a table resource under a base URL.

    Example:
        >>> resource_url("https://example.org/camtrap/", "media")
        'https://example.org/camtrap/media.csv'
    """
    return f"{base_url.rstrip('/')}/{RESOURCE_FILENAMES[table]}"


def load_package_tables(directory: Optional[Union[Path, str]] = None) -> DataPackageTables:
    """
    Load all three tables from a local directory.

    Args:
        directory: Directory holding deployments.csv, media.csv and
                   observations.csv. Defaults to the configured data_dir.

    Returns:
        DataPackageTables with every table decoded.

    Raises:
        DataPackageIOError: If any of the files cannot be read.
        DecodeError: If any of the files is malformed.
    """
    directory = _resolve_directory(directory)
    tables = DataPackageTables(
        deployments=read_table_csv(directory / RESOURCE_FILENAMES["deployments"], DEPLOYMENT_SCHEMA),
        media=read_table_csv(directory / RESOURCE_FILENAMES["media"], MEDIUM_SCHEMA),
        observations=read_table_csv(directory / RESOURCE_FILENAMES["observations"], OBSERVATION_SCHEMA),
    )
    logger.info(
        "Loaded package from %s: %d deployments, %d media, %d observations",
        directory, len(tables.deployments), len(tables.media), len(tables.observations),
    )
    return tables


def fetch_package_tables(
    base_url: str,
    settings: Optional[HttpSettings] = None,
    client: Optional[HttpClient] = None,
) -> DataPackageTables:
    """
    Fetch all three tables from sibling resources under a base URL.

    Args:
        base_url: URL of the directory holding the CSV resources, e.g.
                  "https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example".
        settings: Optional HTTP settings.
        client: Optional HttpClient shared by the three fetches.

    Raises:
        FetchError: If any resource cannot be fetched.
        DecodeError: If any resource is malformed.
    """
    return DataPackageTables(
        deployments=fetch_table_csv(resource_url(base_url, "deployments"), DEPLOYMENT_SCHEMA, settings, client),
        media=fetch_table_csv(resource_url(base_url, "media"), MEDIUM_SCHEMA, settings, client),
        observations=fetch_table_csv(resource_url(base_url, "observations"), OBSERVATION_SCHEMA, settings, client),
    )


def write_package_tables(
    tables: DataPackageTables,
    directory: Optional[Union[Path, str]] = None,
) -> None:
    """
    Write all three tables into a local directory (created if missing).

    Raises:
        DataPackageIOError: If any file cannot be written.
    """
    directory = _resolve_directory(directory)
    write_table_csv(tables.deployments, directory / RESOURCE_FILENAMES["deployments"], DEPLOYMENT_SCHEMA)
    write_table_csv(tables.media, directory / RESOURCE_FILENAMES["media"], MEDIUM_SCHEMA)
    write_table_csv(tables.observations, directory / RESOURCE_FILENAMES["observations"], OBSERVATION_SCHEMA)
