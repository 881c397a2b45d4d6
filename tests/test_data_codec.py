"""
Tests for the CSV codec (camtrap_dp/data/codec.py).

This module tests:
  - Per-cell decoding rules (booleans, numbers, date-times, enums, JSON).
  - Per-cell encoding as the inverse of decoding.
  - Table decoding: header-driven column order, ignored/missing columns,
    structural CSV errors, error context (row/column).
  - The round-trip law decode(encode(records)) == records for all three tables.

Everything runs in memory (bytes / BytesIO); no files or network.
"""

import io
import json
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from camtrap_dp.data.codec import (
    _parser_error_row,
    decode_cell,
    decode_table,
    encode_cell,
    encode_table,
    format_datetime,
    parse_datetime,
)
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
from camtrap_dp.data.schemas import (
    DEPLOYMENT_SCHEMA,
    MEDIUM_SCHEMA,
    OBSERVATION_SCHEMA,
    ColumnKind,
    ColumnSpec,
    DecodeError,
)


CEST = timezone(timedelta(hours=2))


# ============================================================================
# Helper functions for test data generation
# ============================================================================

def csv_bytes(*lines: str) -> bytes:
    """Join CSV lines into UTF-8 bytes with a trailing newline."""
    return ("\n".join(lines) + "\n").encode("utf-8")


def col(kind: ColumnKind, required: bool = False, enum=None) -> ColumnSpec:
    return ColumnSpec("value", "value", kind, required=required, enum=enum)


def make_deployment(**overrides) -> Deployment:
    fields = dict(
        deployment_id="00a2c20d",
        deployment_start=datetime(2020, 5, 30, 2, 24, 31, tzinfo=CEST),
        deployment_end=datetime(2020, 7, 1, 9, 41, 41, tzinfo=CEST),
    )
    fields.update(overrides)
    return Deployment(**fields)


def make_medium(**overrides) -> Medium:
    fields = dict(
        media_id="07840dcc",
        deployment_id="00a2c20d",
        timestamp=datetime(2020, 6, 12, 4, 4, 30, tzinfo=CEST),
        file_path="https://multimedia.agouti.eu/assets/07840dcc/file",
        file_public=True,
        file_mediatype="image/jpeg",
    )
    fields.update(overrides)
    return Medium(**fields)


def make_observation(**overrides) -> Observation:
    fields = dict(
        observation_id="705e6036",
        deployment_id="00a2c20d",
        observation_level=ObservationLevel.EVENT,
        observation_type=ObservationType.ANIMAL,
    )
    fields.update(overrides)
    return Observation(**fields)


def round_trip(records, schema):
    sink = io.BytesIO()
    encode_table(records, sink, schema)
    return decode_table(sink.getvalue(), schema)


DEPLOYMENT_HEADER = "deploymentID,deploymentStart,deploymentEnd"
MEDIA_HEADER = "mediaID,deploymentID,timestamp,filePath,filePublic,fileMediatype,exifData"
OBSERVATION_HEADER = "observationID,deploymentID,observationLevel,observationType,count"


# ============================================================================
# Tests for decode_cell / encode_cell
# ============================================================================

def test_decode_cell_empty_optional_is_none():
    """Empty cells decode to None for every optional kind."""
    for kind in (ColumnKind.STRING, ColumnKind.INTEGER, ColumnKind.FLOAT,
                 ColumnKind.BOOLEAN, ColumnKind.DATETIME, ColumnKind.JSON):
        assert decode_cell("", col(kind)) is None
    assert decode_cell("", col(ColumnKind.ENUM, enum=Sex)) is None


def test_decode_cell_empty_required_raises():
    with pytest.raises(ValueError, match="required value is empty"):
        decode_cell("", col(ColumnKind.STRING, required=True))


def test_decode_cell_string_kept_verbatim():
    assert decode_cell("  Anas platyrhynchos ", col(ColumnKind.STRING)) == "  Anas platyrhynchos "
    assert decode_cell("session:2020|array:north", col(ColumnKind.STRING)) == "session:2020|array:north"


def test_decode_cell_boolean_tokens():
    assert decode_cell("true", col(ColumnKind.BOOLEAN)) is True
    assert decode_cell("false", col(ColumnKind.BOOLEAN)) is False


@pytest.mark.parametrize("text", ["yes", "True", "FALSE", "1", "0", " true"])
def test_decode_cell_boolean_rejects_other_tokens(text):
    with pytest.raises(ValueError, match="expected 'true' or 'false'"):
        decode_cell(text, col(ColumnKind.BOOLEAN))


def test_decode_cell_integer():
    assert decode_cell("3", col(ColumnKind.INTEGER)) == 3
    assert decode_cell("+3", col(ColumnKind.INTEGER)) == 3
    assert decode_cell("4294967295", col(ColumnKind.INTEGER)) == 4294967295


@pytest.mark.parametrize("text", ["-1", "2.5", "three", "1e3", "4294967296"])
def test_decode_cell_integer_rejects_malformed(text):
    with pytest.raises(ValueError):
        decode_cell(text, col(ColumnKind.INTEGER))


def test_decode_cell_float():
    assert decode_cell("51.496", col(ColumnKind.FLOAT)) == 51.496
    assert decode_cell("-15.5", col(ColumnKind.FLOAT)) == -15.5
    assert decode_cell("1", col(ColumnKind.FLOAT)) == 1.0
    assert decode_cell("1e-3", col(ColumnKind.FLOAT)) == 0.001
    assert decode_cell(".5", col(ColumnKind.FLOAT)) == 0.5


@pytest.mark.parametrize("text", ["abc", "nan", "inf", "1,5", "1_000", " 1.5"])
def test_decode_cell_float_rejects_malformed(text):
    with pytest.raises(ValueError, match="expected a decimal number"):
        decode_cell(text, col(ColumnKind.FLOAT))


def test_decode_cell_datetime_with_offsets():
    utc = decode_cell("2020-10-03T22:32:36Z", col(ColumnKind.DATETIME))
    assert utc == datetime(2020, 10, 3, 22, 32, 36, tzinfo=timezone.utc)
    assert utc.utcoffset() == timedelta(0)

    cest = decode_cell("2020-05-30T02:24:31+02:00", col(ColumnKind.DATETIME))
    assert cest.utcoffset() == timedelta(hours=2)
    assert cest == datetime(2020, 5, 30, 0, 24, 31, tzinfo=timezone.utc)


def test_decode_cell_datetime_fractional_seconds():
    value = decode_cell("2020-05-30T02:24:31.25-03:30", col(ColumnKind.DATETIME))
    assert value.microsecond == 250000
    assert value.utcoffset() == -timedelta(hours=3, minutes=30)


@pytest.mark.parametrize("text", [
    "2023-01-01T10:00:00",          # no offset
    "2023-01-01 10:00:00Z",         # space instead of T
    "2023-01-01",                   # date only
    "2023-13-01T10:00:00Z",         # month out of range
    "2023-01-01T10:00:00+0200",     # offset without colon
    "yesterday",
])
def test_decode_cell_datetime_rejects_missing_offset_or_malformed(text):
    with pytest.raises(ValueError):
        decode_cell(text, col(ColumnKind.DATETIME))


def test_decode_cell_enum_exact_match():
    assert decode_cell("roadPaved", col(ColumnKind.ENUM, enum=FeatureType)) is FeatureType.ROAD_PAVED
    assert decode_cell("timeLapse", col(ColumnKind.ENUM, enum=CaptureMethod)) is CaptureMethod.TIME_LAPSE


@pytest.mark.parametrize("text", ["alien", "Animal", "ANIMAL", "anim", "animal "])
def test_decode_cell_enum_rejects_unknown_tokens(text):
    with pytest.raises(ValueError, match="unknown token"):
        decode_cell(text, col(ColumnKind.ENUM, enum=ObservationType))


def test_decode_cell_json():
    assert decode_cell('{"ISO":400}', col(ColumnKind.JSON)) == {"ISO": 400}
    assert decode_cell("[1, 2]", col(ColumnKind.JSON)) == [1, 2]


def test_decode_cell_json_rejects_invalid_document():
    with pytest.raises(ValueError, match="invalid JSON"):
        decode_cell("{ISO: 400}", col(ColumnKind.JSON))


@pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity", '{"x":NaN}'])
def test_decode_cell_json_rejects_non_finite_constants(text):
    with pytest.raises(ValueError, match="not a JSON value"):
        decode_cell(text, col(ColumnKind.JSON))


def test_decode_table_exif_nan_raises():
    data = csv_bytes(
        MEDIA_HEADER,
        "m1,d1,2020-06-12T04:04:30+02:00,media/m1.jpg,true,image/jpeg,NaN",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, MEDIUM_SCHEMA)

    assert exc_info.value.column == "exifData"


@pytest.mark.parametrize("text, kind", [
    ("٣", ColumnKind.INTEGER),
    ("１２", ColumnKind.INTEGER),
    ("٣.٥", ColumnKind.FLOAT),
    ("٢٠٢٠-05-30T02:24:31Z", ColumnKind.DATETIME),
])
def test_decode_cell_rejects_non_ascii_digits(text, kind):
    with pytest.raises(ValueError):
        decode_cell(text, col(kind))


def test_encode_cell_renders_tokens():
    assert encode_cell(None, col(ColumnKind.STRING)) == ""
    assert encode_cell(True, col(ColumnKind.BOOLEAN)) == "true"
    assert encode_cell(False, col(ColumnKind.BOOLEAN)) == "false"
    assert encode_cell(3, col(ColumnKind.INTEGER)) == "3"
    assert encode_cell(51.496, col(ColumnKind.FLOAT)) == "51.496"
    assert encode_cell(1, col(ColumnKind.FLOAT)) == "1.0"
    assert encode_cell(LifeStage.SUBADULT, col(ColumnKind.ENUM, enum=LifeStage)) == "subadult"
    assert encode_cell({"ISO": 400}, col(ColumnKind.JSON)) == '{"ISO":400}'


def test_encode_cell_datetime_keeps_offset():
    value = datetime(2020, 5, 30, 2, 24, 31, tzinfo=CEST)
    assert encode_cell(value, col(ColumnKind.DATETIME)) == "2020-05-30T02:24:31+02:00"
    utc = datetime(2020, 10, 3, 22, 32, 36, tzinfo=timezone.utc)
    assert encode_cell(utc, col(ColumnKind.DATETIME)) == "2020-10-03T22:32:36+00:00"


def test_encode_cell_rejects_invalid_values():
    with pytest.raises(ValueError, match="required value is None"):
        encode_cell(None, col(ColumnKind.STRING, required=True))
    with pytest.raises(ValueError, match="no UTC offset"):
        encode_cell(datetime(2020, 1, 1, 12, 0), col(ColumnKind.DATETIME))
    with pytest.raises(TypeError):
        encode_cell("true", col(ColumnKind.BOOLEAN))
    with pytest.raises(TypeError, match="expected str"):
        encode_cell(5870, col(ColumnKind.STRING))
    with pytest.raises(ValueError):
        encode_cell({"x": float("nan")}, col(ColumnKind.JSON))
    with pytest.raises(ValueError):
        encode_cell(Sex.MALE, col(ColumnKind.ENUM, enum=LifeStage))


def test_parse_and_format_datetime_are_inverse():
    for text in ["2020-05-30T02:24:31+02:00", "2021-03-27T20:38:18-05:00",
                 "2020-01-01T12:00:00.500000+00:00"]:
        assert format_datetime(parse_datetime(text)) == text


# ============================================================================
# Tests for decode_table
# ============================================================================

def test_decode_table_minimal_deployments():
    data = csv_bytes(
        DEPLOYMENT_HEADER,
        "d1,2020-05-30T02:24:31+02:00,2020-07-01T09:41:41+02:00",
        "d2,2020-10-03T22:32:36Z,2020-10-24T16:46:18Z",
    )

    deployments = decode_table(data, DEPLOYMENT_SCHEMA)

    assert [d.deployment_id for d in deployments] == ["d1", "d2"]
    assert all(isinstance(d, Deployment) for d in deployments)
    # Columns absent from the header decode as None
    assert deployments[0].latitude is None
    assert deployments[0].feature_type is None


def test_decode_table_header_defines_column_order():
    """The same rows in a different column order decode identically."""
    ordered = csv_bytes(
        DEPLOYMENT_HEADER + ",latitude",
        "d1,2020-05-30T02:24:31+02:00,2020-07-01T09:41:41+02:00,51.5",
    )
    shuffled = csv_bytes(
        "latitude,deploymentEnd,deploymentID,deploymentStart",
        "51.5,2020-07-01T09:41:41+02:00,d1,2020-05-30T02:24:31+02:00",
    )

    assert decode_table(ordered, DEPLOYMENT_SCHEMA) == decode_table(shuffled, DEPLOYMENT_SCHEMA)


def test_decode_table_ignores_undeclared_columns():
    data = csv_bytes(
        DEPLOYMENT_HEADER + ",longitude,coordinateUncertainty",
        "d1,2020-05-30T02:24:31+02:00,2020-07-01T09:41:41+02:00,4.774,187",
    )

    [deployment] = decode_table(data, DEPLOYMENT_SCHEMA)

    assert deployment.deployment_id == "d1"


def test_decode_table_header_only_yields_no_records():
    assert decode_table(csv_bytes(DEPLOYMENT_HEADER), DEPLOYMENT_SCHEMA) == []


def test_decode_table_accepts_binary_stream():
    stream = io.BytesIO(csv_bytes(DEPLOYMENT_HEADER, "d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z"))
    assert len(decode_table(stream, DEPLOYMENT_SCHEMA)) == 1


def test_decode_table_quoted_cells():
    data = csv_bytes(
        DEPLOYMENT_HEADER + ",habitat,comments",
        'd1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z,"Mixed forest, riparian","He said ""hi"""',
    )

    [deployment] = decode_table(data, DEPLOYMENT_SCHEMA)

    assert deployment.habitat == "Mixed forest, riparian"
    assert deployment.comments == 'He said "hi"'


def test_decode_table_empty_required_field_raises():
    """An empty deploymentID is an error, never a placeholder value."""
    data = csv_bytes(
        DEPLOYMENT_HEADER,
        "d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z",
        ",2020-05-30T02:24:31Z,2020-07-01T09:41:41Z",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 2
    assert exc_info.value.column == "deploymentID"
    assert "required value is empty" in str(exc_info.value)


def test_decode_table_missing_required_column_raises():
    data = csv_bytes(
        "mediaID,deploymentID,timestamp,filePath,fileMediatype",
        "m1,d1,2020-06-12T04:04:30+02:00,media/m1.jpg,image/jpeg",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, MEDIUM_SCHEMA)

    assert "missing required columns" in str(exc_info.value)
    assert "filePublic" in str(exc_info.value)


def test_decode_table_unknown_observation_type_raises():
    data = csv_bytes(OBSERVATION_HEADER, "o1,d1,media,alien,1")

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, OBSERVATION_SCHEMA)

    assert exc_info.value.column == "observationType"
    assert "alien" in str(exc_info.value)


def test_decode_table_timestamp_without_offset_raises():
    data = csv_bytes(DEPLOYMENT_HEADER, "d1,2023-01-01T10:00:00,2023-01-02T10:00:00Z")

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 1
    assert exc_info.value.column == "deploymentStart"


def test_decode_table_non_boolean_file_public_raises():
    data = csv_bytes(
        MEDIA_HEADER,
        "m1,d1,2020-06-12T04:04:30+02:00,media/m1.jpg,yes,image/jpeg,",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, MEDIUM_SCHEMA)

    assert exc_info.value.column == "filePublic"


def test_decode_table_malformed_number_raises():
    data = csv_bytes(OBSERVATION_HEADER, "o1,d1,media,animal,three")

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, OBSERVATION_SCHEMA)

    assert exc_info.value.column == "count"


def test_decode_table_invalid_exif_json_raises():
    data = csv_bytes(
        MEDIA_HEADER,
        'm1,d1,2020-06-12T04:04:30+02:00,media/m1.jpg,true,image/jpeg,"{ISO:400"',
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, MEDIUM_SCHEMA)

    assert exc_info.value.column == "exifData"


def test_decode_table_error_message_includes_context():
    data = csv_bytes(DEPLOYMENT_HEADER, "d1,not-a-date,2023-01-02T10:00:00Z")

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA, context="deployments.csv")

    message = str(exc_info.value)
    assert message.startswith("deployments.csv: row 1, column 'deploymentStart': ")
    assert exc_info.value.context == "deployments.csv"


def test_decode_table_row_with_too_few_fields_raises():
    data = csv_bytes(DEPLOYMENT_HEADER, "d1,2020-05-30T02:24:31Z")

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 1
    assert "fewer fields" in str(exc_info.value)


def test_decode_table_short_row_missing_only_optional_cells_raises():
    """A short row is rejected even when the missing cells are optional."""
    data = csv_bytes(
        DEPLOYMENT_HEADER + ",habitat",
        "d1,2020-01-01T00:00:00Z,2020-01-02T00:00:00Z",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 1
    assert "fewer fields" in str(exc_info.value)


def test_decode_table_short_row_after_quoted_newline_raises():
    """Field counts follow CSV records, not physical lines."""
    data = csv_bytes(
        DEPLOYMENT_HEADER + ",comments",
        'd1,2020-01-01T00:00:00Z,2020-01-02T00:00:00Z,"two\nlines"',
        "d2,2020-01-01T00:00:00Z,2020-01-02T00:00:00Z",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 2


def test_decode_table_row_with_too_many_fields_raises():
    data = csv_bytes(
        DEPLOYMENT_HEADER,
        "d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z",
        "d2,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z,extra",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 2
    assert "more fields" in str(exc_info.value)


def test_decode_table_unterminated_quote_raises():
    data = csv_bytes(DEPLOYMENT_HEADER, '"d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z')

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 1
    assert "malformed CSV" in str(exc_info.value)


def test_parser_error_row_from_pandas_message():
    error = pd.errors.ParserError("Error tokenizing data. C error: Expected 3 fields in line 3, saw 4\n")
    assert _parser_error_row(error) == 2
    assert _parser_error_row(pd.errors.ParserError("something else")) is None


def test_decode_table_utf8_bom_is_ignored():
    data = b"\xef\xbb\xbf" + csv_bytes(DEPLOYMENT_HEADER, "d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z")

    [deployment] = decode_table(data, DEPLOYMENT_SCHEMA)

    assert deployment.deployment_id == "d1"


def test_decode_table_invalid_utf8_raises():
    data = csv_bytes(DEPLOYMENT_HEADER) + b"d\xff1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z\n"

    with pytest.raises(DecodeError, match="not valid UTF-8"):
        decode_table(data, DEPLOYMENT_SCHEMA)


def test_decode_table_empty_content_raises():
    with pytest.raises(DecodeError, match="no header row"):
        decode_table(b"", DEPLOYMENT_SCHEMA)


def test_decode_table_duplicate_header_raises():
    data = csv_bytes(
        "deploymentID,deploymentID,deploymentStart,deploymentEnd",
        "d1,d2,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z",
    )

    with pytest.raises(DecodeError) as exc_info:
        decode_table(data, DEPLOYMENT_SCHEMA)

    assert exc_info.value.column == "deploymentID"


def test_decode_table_first_bad_row_aborts_everything():
    """No partial result: one bad row among good ones fails the whole table."""
    good = "d{},2020-05-30T02:24:31Z,2020-07-01T09:41:41Z"
    lines = [good.format(i) for i in range(10)]
    lines[7] = "d7,2020-05-30T02:24:31Z,tomorrow"

    with pytest.raises(DecodeError) as exc_info:
        decode_table(csv_bytes(DEPLOYMENT_HEADER, *lines), DEPLOYMENT_SCHEMA)

    assert exc_info.value.row == 8


def test_decode_table_exif_object():
    """A Medium EXIF cell {"ISO":400} decodes to the equivalent dict."""
    data = csv_bytes(
        MEDIA_HEADER,
        'm1,d1,2020-06-12T04:04:30+02:00,media/m1.jpg,true,image/jpeg,"{""ISO"":400}"',
    )

    [medium] = decode_table(data, MEDIUM_SCHEMA)

    assert medium.exif_data == {"ISO": 400}

    sink = io.BytesIO()
    encode_table([medium], sink, MEDIUM_SCHEMA)
    [reread] = decode_table(sink.getvalue(), MEDIUM_SCHEMA)
    assert reread.exif_data == {"ISO": 400}
    assert json.loads(encode_cell(medium.exif_data, MEDIUM_SCHEMA.column_for_header("exifData"))) == {"ISO": 400}


# ============================================================================
# Tests for encode_table and round trips
# ============================================================================

def test_encode_table_writes_header_in_declared_order():
    sink = io.BytesIO()

    encode_table([], sink, DEPLOYMENT_SCHEMA)

    assert sink.getvalue().decode("utf-8") == ",".join(DEPLOYMENT_SCHEMA.headers) + "\n"


def test_encode_table_renders_cells():
    sink = io.BytesIO()
    deployment = make_deployment(
        latitude=51.496,
        bait_use=False,
        feature_type=FeatureType.NEST_SITE,
        habitat="Mixed forest, riparian",
    )

    encode_table([deployment], sink, DEPLOYMENT_SCHEMA)

    lines = sink.getvalue().decode("utf-8").splitlines()
    assert len(lines) == 2
    assert lines[1] == (
        "00a2c20d,,,51.496,,2020-05-30T02:24:31+02:00,2020-07-01T09:41:41+02:00,"
        ",,,,,,,,,,false,nestSite,\"Mixed forest, riparian\",,,"
    )


def test_encode_table_rejects_wrong_record_type():
    with pytest.raises(TypeError, match="expected Deployment"):
        encode_table([make_medium()], io.BytesIO(), DEPLOYMENT_SCHEMA)


def test_encode_table_bad_record_leaves_sink_untouched():
    sink = io.BytesIO()
    naive = make_deployment(deployment_end=datetime(2020, 7, 1, 9, 41, 41))

    with pytest.raises(ValueError, match="record 2, field 'deployment_end'"):
        encode_table([make_deployment(), naive], sink, DEPLOYMENT_SCHEMA)

    assert sink.getvalue() == b""


def test_round_trip_deployments():
    records = [
        make_deployment(),
        make_deployment(
            deployment_id="29b7d356",
            location_id="2df5259b",
            location_name="B_DL_val 5_beek kleine vijver",
            latitude=51.18,
            location_radius=1.0,
            deployment_start=datetime(2020, 10, 3, 22, 32, 36, tzinfo=timezone.utc),
            deployment_end=datetime(2020, 10, 24, 16, 46, 18, 125000, tzinfo=CEST),
            setup_by="Joris Everaert",
            camera_id="5870",
            camera_model="Reconyx-HC500",
            camera_delay=0.0,
            camera_height=1.3,
            camera_depth=None,
            camera_angle=-15.5,
            camera_heading=359.99,
            detection_distance=8.2,
            timestamp_issues=True,
            bait_use=False,
            feature_type=FeatureType.CULVERT,
            habitat="Mixed forest, riparian",
            deployment_groups="session:2020|array:north",
            tags="bait:none",
            comments='Line one\nline "two"',
        ),
    ]

    decoded = round_trip(records, DEPLOYMENT_SCHEMA)

    assert decoded == records
    assert decoded[1].deployment_start.utcoffset() == timedelta(0)
    assert decoded[1].deployment_end.utcoffset() == timedelta(hours=2)


def test_round_trip_media():
    records = [
        make_medium(exif_data={"ISO": 400, "Make": "RECONYX", "Lens": [4.5, 13.5], "Flash": None}),
        make_medium(
            media_id="fb58a2b9",
            capture_method=CaptureMethod.TIME_LAPSE,
            file_public=False,
            file_name="IMG_0001.JPG",
            file_mediatype="video/mp4",
            favorite=False,
            comments="Person in frame, not public",
        ),
    ]

    assert round_trip(records, MEDIUM_SCHEMA) == records


def test_round_trip_observations():
    records = [
        make_observation(
            event_id="4bb69c0b",
            event_start=datetime(2020, 6, 12, 4, 4, 30, tzinfo=CEST),
            event_end=datetime(2020, 6, 12, 4, 4, 31, tzinfo=CEST),
            scientific_name="Anas platyrhynchos",
            count=3,
            life_stage=LifeStage.ADULT,
            sex=Sex.FEMALE,
            behavior="foraging|walking",
            classification_method=ClassificationMethod.HUMAN,
            classified_by="Danny Van der beeck",
            classification_timestamp=datetime(2023, 2, 6, 16, 0, 39, tzinfo=timezone.utc),
        ),
        make_observation(
            observation_id="ef2f7140",
            media_id="07840dcc",
            observation_level=ObservationLevel.MEDIA,
            observation_type=ObservationType.HUMAN,
            camera_setup_type=CameraSetupType.CALIBRATION,
            count=0,
            individual_id="fox-07",
            individual_position_radius=3.2,
            individual_position_angle=-12.5,
            individual_speed=0.8,
            bbox_x=0.683,
            bbox_y=0.359,
            bbox_width=0.16,
            bbox_height=0.303,
            classification_method=ClassificationMethod.MACHINE,
            classification_probability=0.92,
            observation_tags="colour:red",
            observation_comments="ok",
        ),
    ]

    assert round_trip(records, OBSERVATION_SCHEMA) == records


def test_round_trip_empty_sequence():
    assert round_trip([], OBSERVATION_SCHEMA) == []
