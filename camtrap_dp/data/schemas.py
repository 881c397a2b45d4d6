"""
Table schemas for the Camtrap DP CSV files.

**Conceptual**: This module defines the "data contracts" of the three tables.
Every column is declared exactly once, as a ColumnSpec tying together:
  - the record attribute name (snake_case, e.g. `deployment_id`),
  - the CSV header name (Camtrap DP convention, e.g. `deploymentID`),
  - the kind of value the cell holds (string, float, date-time, enum, ...),
  - whether the column is required.

The codec reads these tables in both directions, so the header names used for
writing are by construction the ones accepted when reading. Column order in a
schema is the order written to disk; on read, order comes from the header row.

**Schema rules**:
  - Required cells must be non-empty.
  - Date-times carry an explicit UTC offset (`Z` or `+hh:mm`).
  - Enum cells match one of the declared tokens exactly (case-sensitive).
  - Violations raise DecodeError with the row and column involved.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from camtrap_dp.data.records import (
    CameraSetupType,
    CaptureMethod,
    ClassificationMethod,
    Deployment,
    FeatureType,
    LifeStage,
    Medium,
    Observation,
    ObservationLevel,
    ObservationType,
    Sex,
)


class DecodeError(Exception):
    """
    Raised when CSV content does not decode into records of a schema.

    **Conceptual**: Signals bad data (as opposed to a bad environment): a
    malformed cell, a missing required column, an unknown enum token, a
    date-time without offset, invalid embedded JSON, or broken CSV structure.

    Attributes:
        row: 1-based data row number (the header row is not counted), or None
             when the problem is not tied to a row.
        column: CSV header of the offending column, or None.
        context: Description of the source (path, URL), or None.
    """

    def __init__(
        self,
        message: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
        context: Optional[str] = None,
    ):
        self.message = message
        self.row = row
        self.column = column
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.row is not None:
            location.append(f"row {self.row}")
        if self.column is not None:
            location.append(f"column '{self.column}'")
        prefix = f"{self.context}: " if self.context else ""
        if location:
            prefix += ", ".join(location) + ": "
        return prefix + self.message


class ColumnKind(Enum):
    """Kind of value held by a CSV cell."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ENUM = "enum"
    JSON = "json"


@dataclass(frozen=True)
class ColumnSpec:
    """
    One column of a table: record attribute, CSV header, kind, requiredness.

    `enum` names the Enum class for ENUM columns and must be None otherwise.
    """
    field_name: str
    header: str
    kind: ColumnKind
    required: bool = False
    enum: Optional[type[Enum]] = None

    def __post_init__(self):
        if (self.kind is ColumnKind.ENUM) != (self.enum is not None):
            raise ValueError(
                f"Column '{self.header}': an enum class must be given for ENUM "
                f"columns and only for them (kind={self.kind.value})."
            )


@dataclass(frozen=True)
class TableSchema:
    """
    Ordered column declarations for one record type.

    Attributes:
        name: Table name as used in the data package (e.g. "deployments").
        record_type: Record class built from each row.
        columns: Columns in declared (written) order.
    """
    name: str
    record_type: type
    columns: tuple[ColumnSpec, ...]

    def __post_init__(self):
        headers = [column.header for column in self.columns]
        duplicates = sorted({h for h in headers if headers.count(h) > 1})
        if duplicates:
            raise ValueError(f"Schema '{self.name}' declares duplicate headers: {duplicates}")

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]

    @property
    def required_headers(self) -> list[str]:
        return [column.header for column in self.columns if column.required]

    def column_for_header(self, header: str) -> Optional[ColumnSpec]:
        for column in self.columns:
            if column.header == header:
                return column
        return None


STRING = ColumnKind.STRING
INTEGER = ColumnKind.INTEGER
FLOAT = ColumnKind.FLOAT
BOOLEAN = ColumnKind.BOOLEAN
DATETIME = ColumnKind.DATETIME
ENUM = ColumnKind.ENUM
JSON = ColumnKind.JSON


DEPLOYMENT_SCHEMA = TableSchema(
    name="deployments",
    record_type=Deployment,
    columns=(
        ColumnSpec("deployment_id", "deploymentID", STRING, required=True),
        ColumnSpec("location_id", "locationID", STRING),
        ColumnSpec("location_name", "locationName", STRING),
        ColumnSpec("latitude", "latitude", FLOAT),
        ColumnSpec("location_radius", "locationRadius", FLOAT),
        ColumnSpec("deployment_start", "deploymentStart", DATETIME, required=True),
        ColumnSpec("deployment_end", "deploymentEnd", DATETIME, required=True),
        ColumnSpec("setup_by", "setupBy", STRING),
        ColumnSpec("camera_id", "cameraID", STRING),
        ColumnSpec("camera_model", "cameraModel", STRING),
        ColumnSpec("camera_delay", "cameraDelay", FLOAT),
        ColumnSpec("camera_height", "cameraHeight", FLOAT),
        ColumnSpec("camera_depth", "cameraDepth", FLOAT),
        ColumnSpec("camera_angle", "cameraAngle", FLOAT),
        ColumnSpec("camera_heading", "cameraHeading", FLOAT),
        ColumnSpec("detection_distance", "detectionDistance", FLOAT),
        ColumnSpec("timestamp_issues", "timestampIssues", BOOLEAN),
        ColumnSpec("bait_use", "baitUse", BOOLEAN),
        ColumnSpec("feature_type", "featureType", ENUM, enum=FeatureType),
        ColumnSpec("habitat", "habitat", STRING),
        ColumnSpec("deployment_groups", "deploymentGroups", STRING),
        ColumnSpec("tags", "tags", STRING),
        ColumnSpec("comments", "comments", STRING),
    ),
)

MEDIUM_SCHEMA = TableSchema(
    name="media",
    record_type=Medium,
    columns=(
        ColumnSpec("media_id", "mediaID", STRING, required=True),
        ColumnSpec("deployment_id", "deploymentID", STRING, required=True),
        ColumnSpec("capture_method", "captureMethod", ENUM, enum=CaptureMethod),
        ColumnSpec("timestamp", "timestamp", DATETIME, required=True),
        ColumnSpec("file_path", "filePath", STRING, required=True),
        ColumnSpec("file_public", "filePublic", BOOLEAN, required=True),
        ColumnSpec("file_name", "fileName", STRING),
        ColumnSpec("file_mediatype", "fileMediatype", STRING, required=True),
        ColumnSpec("exif_data", "exifData", JSON),
        ColumnSpec("favorite", "favorite", BOOLEAN),
        ColumnSpec("comments", "comments", STRING),
    ),
)

OBSERVATION_SCHEMA = TableSchema(
    name="observations",
    record_type=Observation,
    columns=(
        ColumnSpec("observation_id", "observationID", STRING, required=True),
        ColumnSpec("deployment_id", "deploymentID", STRING, required=True),
        ColumnSpec("media_id", "mediaID", STRING),
        ColumnSpec("event_id", "eventID", STRING),
        ColumnSpec("event_start", "eventStart", DATETIME),
        ColumnSpec("event_end", "eventEnd", DATETIME),
        ColumnSpec("observation_level", "observationLevel", ENUM, required=True, enum=ObservationLevel),
        ColumnSpec("observation_type", "observationType", ENUM, required=True, enum=ObservationType),
        ColumnSpec("camera_setup_type", "cameraSetupType", ENUM, enum=CameraSetupType),
        ColumnSpec("scientific_name", "scientificName", STRING),
        ColumnSpec("count", "count", INTEGER),
        ColumnSpec("life_stage", "lifeStage", ENUM, enum=LifeStage),
        ColumnSpec("sex", "sex", ENUM, enum=Sex),
        ColumnSpec("behavior", "behavior", STRING),
        ColumnSpec("individual_id", "individualID", STRING),
        ColumnSpec("individual_position_radius", "individualPositionRadius", FLOAT),
        ColumnSpec("individual_position_angle", "individualPositionAngle", FLOAT),
        ColumnSpec("individual_speed", "individualSpeed", FLOAT),
        ColumnSpec("bbox_x", "bboxX", FLOAT),
        ColumnSpec("bbox_y", "bboxY", FLOAT),
        ColumnSpec("bbox_width", "bboxWidth", FLOAT),
        ColumnSpec("bbox_height", "bboxHeight", FLOAT),
        ColumnSpec("classification_method", "classificationMethod", ENUM, enum=ClassificationMethod),
        ColumnSpec("classified_by", "classifiedBy", STRING),
        ColumnSpec("classification_timestamp", "classificationTimestamp", DATETIME),
        ColumnSpec("classification_probability", "classificationProbability", FLOAT),
        ColumnSpec("observation_tags", "observationTags", STRING),
        ColumnSpec("observation_comments", "observationComments", STRING),
    ),
)

# Table name -> schema, keyed by the names used for the package resources
TABLE_SCHEMAS = {
    DEPLOYMENT_SCHEMA.name: DEPLOYMENT_SCHEMA,
    MEDIUM_SCHEMA.name: MEDIUM_SCHEMA,
    OBSERVATION_SCHEMA.name: OBSERVATION_SCHEMA,
}


def get_table_schema(name: str) -> TableSchema:
    """
    Look up a table schema by table name.

    Args:
        name: One of "deployments", "media", "observations".

    Returns:
        The matching TableSchema.

    Raises:
        KeyError: If the name is not a known table.
    """
    try:
        return TABLE_SCHEMAS[name]
    except KeyError:
        raise KeyError(
            f"Unknown table '{name}'. Expected one of: {sorted(TABLE_SCHEMAS)}."
        ) from None
