"""
Generic CSV codec for Camtrap DP tables.

**Conceptual**: One decoder and one encoder serve all three tables; the table
is chosen by passing its TableSchema. pandas parses the CSV (quoting,
escaping) with every cell read as raw text, and this module types each cell
according to its ColumnSpec. pandas pads short rows with empty cells, so the
field count of every record is taken from a separate `csv` tokenizer pass.

**Cell rules** (decode, encode is the exact inverse):
  - empty cell: None for optional columns, DecodeError for required ones
  - BOOLEAN: exactly `true` or `false`
  - INTEGER: unsigned decimal digits, at most 4294967295
  - FLOAT: decimal number text such as `-12.5` or `1e-3` (no nan/inf)
  - DATETIME: `YYYY-MM-DDThh:mm:ss[.ffffff]` followed by `Z` or `+hh:mm`
  - ENUM: one of the Enum's values, matched exactly
  - JSON: any syntactically valid JSON document
  - STRING: kept verbatim

Decoding is eager and all-or-nothing: the first bad row raises DecodeError
and no records are returned.
"""

import csv
import io
import json
import re
from datetime import datetime
from typing import Any, BinaryIO, Iterable, Optional, Union

import pandas as pd

from camtrap_dp.data.schemas import ColumnKind, ColumnSpec, DecodeError, TableSchema


_BOOLEAN_TOKENS = {"true": True, "false": False}

_INTEGER_PATTERN = re.compile(r"\+?\d+", re.ASCII)
_UINT32_MAX = 2**32 - 1

_FLOAT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

_DATETIME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)

# pandas reports structural errors by physical line ("... in line 3, saw 4")
_PARSER_LINE_PATTERN = re.compile(r"\bline (\d+)")


def _reject_json_constant(name: str):
    raise ValueError(f"invalid JSON ({name} is not a JSON value)")


def decode_cell(text: str, column: ColumnSpec) -> Any:
    """
    Convert the text of one CSV cell to the value of a record field.

    Args:
        text: Raw cell text ("" for an empty cell).
        column: Column the cell belongs to.

    Returns:
        The typed value, or None for an empty optional cell.

    Raises:
        ValueError: If the cell is empty but required, or does not parse as
                    the column's kind.
    """
    if text == "":
        if column.required:
            raise ValueError("required value is empty")
        return None

    kind = column.kind

    if kind is ColumnKind.STRING:
        return text

    if kind is ColumnKind.BOOLEAN:
        try:
            return _BOOLEAN_TOKENS[text]
        except KeyError:
            raise ValueError(f"expected 'true' or 'false', got {text!r}") from None

    if kind is ColumnKind.INTEGER:
        if not _INTEGER_PATTERN.fullmatch(text):
            raise ValueError(f"expected a non-negative integer, got {text!r}")
        value = int(text)
        if value > _UINT32_MAX:
            raise ValueError(f"integer {text!r} is out of range (max {_UINT32_MAX})")
        return value

    if kind is ColumnKind.FLOAT:
        if not _FLOAT_PATTERN.fullmatch(text):
            raise ValueError(f"expected a decimal number, got {text!r}")
        return float(text)

    if kind is ColumnKind.DATETIME:
        return parse_datetime(text)

    if kind is ColumnKind.ENUM:
        try:
            return column.enum(text)
        except ValueError:
            tokens = [member.value for member in column.enum]
            raise ValueError(f"unknown token {text!r}, expected one of {tokens}") from None

    if kind is ColumnKind.JSON:
        try:
            return json.loads(text, parse_constant=_reject_json_constant)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON ({e.msg} at char {e.pos})") from e

    raise ValueError(f"unsupported column kind: {kind}")


def encode_cell(value: Any, column: ColumnSpec) -> str:
    """
    Convert a record field value to the text of one CSV cell.

    Args:
        value: Field value (None for absent).
        column: Column the value belongs to.

    Returns:
        Cell text ("" for None).

    Raises:
        ValueError: If a required value is None, a date-time is naive, or an
                    enum value is not one of the column's tokens.
        TypeError: If a value has the wrong Python type for the column.
    """
    if value is None:
        if column.required:
            raise ValueError("required value is None")
        return ""

    kind = column.kind

    if kind is ColumnKind.STRING:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        return value

    if kind is ColumnKind.BOOLEAN:
        if not isinstance(value, bool):
            raise TypeError(f"expected bool, got {type(value).__name__}")
        return "true" if value else "false"

    if kind is ColumnKind.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return str(value)

    if kind is ColumnKind.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected float, got {type(value).__name__}")
        return repr(float(value))

    if kind is ColumnKind.DATETIME:
        return format_datetime(value)

    if kind is ColumnKind.ENUM:
        return column.enum(value).value

    if kind is ColumnKind.JSON:
        return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))

    raise ValueError(f"unsupported column kind: {kind}")


def parse_datetime(text: str) -> datetime:
    """
    Parse an ISO 8601 date-time that carries an explicit UTC offset.

    Accepted forms: `2020-05-30T02:24:31Z`, `2020-05-30T02:24:31+02:00`, with
    optional fractional seconds. The returned datetime keeps the offset.

    Raises:
        ValueError: If the offset is missing or the text is malformed.
    """
    if not _DATETIME_PATTERN.fullmatch(text):
        raise ValueError(
            f"expected ISO 8601 date-time with offset "
            f"(YYYY-MM-DDThh:mm:ssZ or YYYY-MM-DDThh:mm:ss+hh:mm), got {text!r}"
        )
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"invalid date-time {text!r}: {e}") from e


def format_datetime(value: datetime) -> str:
    """Render an offset-aware datetime as ISO 8601 (e.g. 2020-05-30T02:24:31+02:00)."""
    if not isinstance(value, datetime):
        raise TypeError(f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"date-time {value.isoformat()} has no UTC offset")
    return value.isoformat()


def _parser_error_row(error: Exception) -> Optional[int]:
    """Data row number named in a pandas ParserError message, if any."""
    match = _PARSER_LINE_PATTERN.search(str(error))
    if match is None:
        return None
    line = int(match.group(1))
    return line - 1 if line > 1 else None


def _is_blank_record(record: list) -> bool:
    return not record or (len(record) == 1 and not record[0].strip())


def _record_widths(text: str, context: str) -> list[int]:
    """
    Field count of every non-blank record, header first.

    Raises DecodeError on broken quoting, or when a data record does not
    have exactly as many fields as the header.
    """
    widths = []
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        for record in reader:
            if not _is_blank_record(record):
                widths.append(len(record))
    except csv.Error as e:
        raise DecodeError(f"malformed CSV: {e}", row=len(widths) or None, context=context) from e

    for row_number, width in enumerate(widths[1:], start=1):
        if width < widths[0]:
            raise DecodeError(
                f"row has fewer fields than the header ({width} of {widths[0]})",
                row=row_number,
                context=context,
            )
        if width > widths[0]:
            raise DecodeError(
                f"row has more fields than the header ({width} of {widths[0]})",
                row=row_number,
                context=context,
            )
    return widths


def _read_raw_rows(source: BinaryIO, context: str) -> list[tuple]:
    try:
        text = source.read().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(f"content is not valid UTF-8: {e}", context=context) from e

    widths = _record_widths(text, context)

    # header=None keeps the header as row 0
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.EmptyDataError as e:
        raise DecodeError("no header row (empty CSV content)", context=context) from e
    except pd.errors.ParserError as e:
        raise DecodeError(f"malformed CSV: {e}", row=_parser_error_row(e), context=context) from e

    rows = list(frame.itertuples(index=False, name=None))
    if len(rows) != len(widths):
        raise DecodeError(
            f"CSV records could not be delimited consistently "
            f"({len(widths)} records found, {len(rows)} rows parsed)",
            context=context,
        )
    return rows


def decode_table(
    source: Union[bytes, BinaryIO],
    schema: TableSchema,
    context: Optional[str] = None,
) -> list:
    """
    Decode CSV content into a list of records of `schema.record_type`.

    **Functionally**:
      - Reads the header row and locates every schema column by header name,
        so column order in the file is free.
      - Ignores columns the schema does not declare.
      - A required column missing from the header is an error; a missing
        optional column decodes as None in every record.
      - Each cell goes through decode_cell; the first failure aborts.

    Args:
        source: CSV bytes or a binary stream positioned at the header row.
        schema: Table schema to decode with.
        context: Description of the source for error messages (path, URL).
                 Defaults to the table name.

    Returns:
        List of records, in file order.

    Raises:
        DecodeError: On malformed CSV structure or any invalid cell.

    Example:
        >>> data = b"deploymentID,deploymentStart,deploymentEnd\\n" \\
        ...        b"d1,2020-05-30T02:24:31Z,2020-07-01T09:41:41Z\\n"
        >>> [d.deployment_id for d in decode_table(data, DEPLOYMENT_SCHEMA)]
        ['d1']
    """
    context = context or schema.name
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    rows = _read_raw_rows(source, context)
    header, data_rows = rows[0], rows[1:]

    positions = {}
    for position, name in enumerate(header):
        if schema.column_for_header(name) is None:
            continue
        if name in positions:
            raise DecodeError("column appears more than once in the header", column=name, context=context)
        positions[name] = position

    missing = [h for h in schema.required_headers if h not in positions]
    if missing:
        raise DecodeError(
            f"missing required columns {missing}. Found columns: {list(header)}",
            context=context,
        )

    records = []
    for row_number, values in enumerate(data_rows, start=1):
        fields = {}
        for column in schema.columns:
            position = positions.get(column.header)
            text = values[position] if position is not None else ""
            try:
                fields[column.field_name] = decode_cell(text, column)
            except ValueError as e:
                raise DecodeError(str(e), row=row_number, column=column.header, context=context) from e

        records.append(schema.record_type(**fields))

    return records


def encode_table(records: Iterable, sink: BinaryIO, schema: TableSchema) -> None:
    """
    Encode records as CSV into a binary sink, then flush it.

    **Functionally**:
      - Writes the header (schema headers, in declared order) and one row per
        record, UTF-8, comma-delimited, `\\n` line endings, quoting only the
        cells that need it.
      - All rows are converted before anything is written, so a bad record
        leaves the sink untouched.

    Args:
        records: Records of `schema.record_type`.
        sink: Writable binary stream.
        schema: Table schema to encode with.

    Raises:
        TypeError: If a record is not a `schema.record_type`, or a field
                   holds a value of the wrong type.
        ValueError: If a field value cannot be encoded (see encode_cell).
    """
    rows = []
    for index, record in enumerate(records, start=1):
        if not isinstance(record, schema.record_type):
            raise TypeError(
                f"{schema.name}: record {index} is a {type(record).__name__}, "
                f"expected {schema.record_type.__name__}"
            )
        row = []
        for column in schema.columns:
            try:
                row.append(encode_cell(getattr(record, column.field_name), column))
            except (TypeError, ValueError) as e:
                raise type(e)(f"{schema.name}: record {index}, field '{column.field_name}': {e}") from e
        rows.append(row)

    frame = pd.DataFrame(rows, columns=schema.headers, dtype=object)
    text = frame.to_csv(index=False, lineterminator="\n")
    sink.write(text.encode("utf-8"))
    sink.flush()
