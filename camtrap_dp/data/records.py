"""
Typed records for the three Camtrap DP tables.

**Conceptual**: A Camera Trap Data Package describes camera placements
(deployments), the media files recorded during them, and the observations
classified from those media. Each table row becomes one immutable record:

  - Deployment: one camera placement, bounded by start/end timestamps.
  - Medium: one image, video or audio file recorded during a deployment.
  - Observation: a classification of a medium, or of an event spanning media.

Closed vocabularies are Enums whose values are the exact wire tokens. Fields
are snake_case; the CSV header for each field is declared in schemas.py.

Absent optional values are None. Date-times are timezone-aware datetimes that
keep the UTC offset they were written with. `Medium.exif_data` holds whatever
JSON value the cell contained (usually a dict), so Medium records carrying
EXIF data compare by value but are not hashable.

Pipe-separated fields (tags, deployment_groups, behavior, observation_tags)
are kept as the raw strings.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class FeatureType(Enum):
    """Type of the feature (if any) associated with a deployment."""
    ROAD_PAVED = "roadPaved"
    ROAD_DIRT = "roadDirt"
    TRAIL_HIKING = "trailHiking"
    TRAIL_GAME = "trailGame"
    ROAD_UNDERPASS = "roadUnderpass"
    ROAD_OVERPASS = "roadOverpass"
    ROAD_BRIDGE = "roadBridge"
    CULVERT = "culvert"
    BURROW = "burrow"
    NEST_SITE = "nestSite"
    CARCASS = "carcass"
    WATER_SOURCE = "waterSource"
    FRUITING_TREE = "fruitingTree"


class CaptureMethod(Enum):
    """Method used to capture a media file."""
    ACTIVITY_DETECTION = "activityDetection"
    TIME_LAPSE = "timeLapse"


class ObservationLevel(Enum):
    """
    Level at which an observation was classified.

    MEDIA observations are tied to one media file (mediaID) and need not be
    mutually exclusive. EVENT observations cover a whole event and should be
    mutually exclusive, so that their counts can be summed.
    """
    MEDIA = "media"
    EVENT = "event"


class ObservationType(Enum):
    """Type of an observation."""
    ANIMAL = "animal"
    HUMAN = "human"
    VEHICLE = "vehicle"
    BLANK = "blank"
    UNKNOWN = "unknown"
    UNCLASSIFIED = "unclassified"


class CameraSetupType(Enum):
    """Type of the camera setup action (if any) associated with an observation."""
    SETUP = "setup"
    CALIBRATION = "calibration"


class LifeStage(Enum):
    ADULT = "adult"
    SUBADULT = "subadult"
    JUVENILE = "juvenile"


class Sex(Enum):
    FEMALE = "female"
    MALE = "male"


class ClassificationMethod(Enum):
    """Method (most recently) used to classify an observation."""
    HUMAN = "human"
    MACHINE = "machine"


@dataclass(frozen=True, kw_only=True)
class Deployment:
    """
    Camera trap placement (deployment).

    Attributes:
        deployment_id: Unique identifier of the deployment.
        location_id: Identifier of the deployment location.
        location_name: Name given to the deployment location.
        latitude: Latitude in decimal degrees (WGS84).
        location_radius: Radius in meters of the smallest circle containing
                         the deployment location.
        deployment_start: When the deployment started (offset-aware).
        deployment_end: When the deployment ended (offset-aware). Expected,
                        not enforced, to be >= deployment_start.
        setup_by: Person or organization that deployed the camera.
        camera_id: Identifier of the camera (e.g. serial number).
        camera_model: Manufacturer and model, as manufacturer-model.
        camera_delay: Seconds after a detection during which activity is ignored.
        camera_height: Height of the camera in meters.
        camera_depth: Depth of the camera in meters.
        camera_angle: Vertical angle in degrees (-90 down, 0 level, 90 up).
        camera_heading: Horizontal angle in degrees clockwise from north.
        detection_distance: Maximum reliable detection distance in meters.
        timestamp_issues: True if media timestamps have known issues.
        bait_use: True if bait was used.
        feature_type: Feature associated with the deployment.
        habitat: Short characterization of the habitat.
        deployment_groups: Pipe-separated deployment groups.
        tags: Pipe-separated tags.
        comments: Free-text comments.
    """
    deployment_id: str
    location_id: Optional[str] = None
    location_name: Optional[str] = None
    latitude: Optional[float] = None
    location_radius: Optional[float] = None
    deployment_start: datetime
    deployment_end: datetime
    setup_by: Optional[str] = None
    camera_id: Optional[str] = None
    camera_model: Optional[str] = None
    camera_delay: Optional[float] = None
    camera_height: Optional[float] = None
    camera_depth: Optional[float] = None
    camera_angle: Optional[float] = None
    camera_heading: Optional[float] = None
    detection_distance: Optional[float] = None
    timestamp_issues: Optional[bool] = None
    bait_use: Optional[bool] = None
    feature_type: Optional[FeatureType] = None
    habitat: Optional[str] = None
    deployment_groups: Optional[str] = None
    tags: Optional[str] = None
    comments: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class Medium:
    """
    Media file recorded during a deployment.

    `deployment_id` should reference an existing Deployment; that is for the
    caller to check. `file_path` is a URL or a path relative to the package,
    and `file_mediatype` an IANA media type; neither is validated.
    """
    media_id: str
    deployment_id: str
    capture_method: Optional[CaptureMethod] = None
    timestamp: datetime
    file_path: str
    file_public: bool
    file_name: Optional[str] = None
    file_mediatype: str
    exif_data: Optional[Any] = None
    favorite: Optional[bool] = None
    comments: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class Observation:
    """
    Observation derived from a media file or from an event.

    Media-level observations usually carry `media_id`; event-level ones carry
    `event_id` with `event_start`/`event_end`. Bounding box values are
    fractions of the media width/height, measured from the top-left corner.
    `classification_probability` is expected in [0, 1] but not checked.
    """
    observation_id: str
    deployment_id: str
    media_id: Optional[str] = None
    event_id: Optional[str] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    observation_level: ObservationLevel
    observation_type: ObservationType
    camera_setup_type: Optional[CameraSetupType] = None
    scientific_name: Optional[str] = None
    count: Optional[int] = None
    life_stage: Optional[LifeStage] = None
    sex: Optional[Sex] = None
    behavior: Optional[str] = None
    individual_id: Optional[str] = None
    individual_position_radius: Optional[float] = None
    individual_position_angle: Optional[float] = None
    individual_speed: Optional[float] = None
    bbox_x: Optional[float] = None
    bbox_y: Optional[float] = None
    bbox_width: Optional[float] = None
    bbox_height: Optional[float] = None
    classification_method: Optional[ClassificationMethod] = None
    classified_by: Optional[str] = None
    classification_timestamp: Optional[datetime] = None
    classification_probability: Optional[float] = None
    observation_tags: Optional[str] = None
    observation_comments: Optional[str] = None
