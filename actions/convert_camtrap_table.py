#!/usr/bin/env python3
"""
Read a Camtrap DP table from a file or URL and optionally rewrite it.

**Usage**:
    python actions/convert_camtrap_table.py deployments data/deployments.csv
    python actions/convert_camtrap_table.py media https://example.org/camtrap/media.csv
    python actions/convert_camtrap_table.py observations data/observations.csv --output out/observations.csv

**What this script does**:
  1. Parse command line arguments (table, source, output)
  2. Read the table from a local path or an http(s) URL, decoding every cell
  3. Print a summary (record count, source)
  4. If --output is given, write the records back as canonical CSV

**Exit codes**:
  - 0: Success
  - 1: Bad data, unreadable/unwritable file, or failed fetch

**Example output**:
    $ python actions/convert_camtrap_table.py deployments data/deployments.csv --output out.csv
    Reading deployments from data/deployments.csv...
      ✓ Decoded 4 deployments records
      ✓ Saved to out.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path so we can import camtrap_dp from a checkout
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from camtrap_dp.config.settings import get_settings
from camtrap_dp.data.io import DataPackageIOError, read_table_csv, write_table_csv
from camtrap_dp.data.schemas import TABLE_SCHEMAS, DecodeError, get_table_schema
from camtrap_dp.sources.http_client import FetchError
from camtrap_dp.sources.url_source import fetch_table_csv


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: table (str), source (str), output (str or None),
        verbose (bool).
    """
    parser = argparse.ArgumentParser(
        description="Read a Camtrap DP table from a file or URL and optionally rewrite it",
        epilog="""
Examples:
  # Check that a local deployments table decodes
  python actions/convert_camtrap_table.py deployments data/deployments.csv

  # Fetch the media table of the Camtrap DP example package
  python actions/convert_camtrap_table.py media https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example/media.csv

  # Rewrite a table in canonical column order
  python actions/convert_camtrap_table.py observations in.csv --output out/observations.csv
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "table",
        choices=sorted(TABLE_SCHEMAS),
        help="Which table the source holds",
    )

    parser.add_argument(
        "source",
        help="Local path or http(s) URL of the CSV file",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the decoded records to this path as CSV",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )

    return parser.parse_args(argv)


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def main(argv=None) -> int:
    """
    Main entry point for the script.

    Returns:
        Process exit code (0 on success, 1 on any read/fetch/write error).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    schema = get_table_schema(args.table)

    print(f"Reading {args.table} from {args.source}...")
    try:
        if is_url(args.source):
            records = fetch_table_csv(args.source, schema, settings=get_settings().http)
        else:
            records = read_table_csv(args.source, schema)
    except DecodeError as e:
        print(f"  ✗ Invalid {args.table} data: {e}", file=sys.stderr)
        return 1
    except DataPackageIOError as e:
        print(f"  ✗ Cannot read file: {e}", file=sys.stderr)
        return 1
    except FetchError as e:
        print(f"  ✗ Fetch failed: {e}", file=sys.stderr)
        return 1

    print(f"  ✓ Decoded {len(records)} {args.table} records")

    if args.output:
        try:
            write_table_csv(records, args.output, schema)
        except DataPackageIOError as e:
            print(f"  ✗ Cannot write output: {e}", file=sys.stderr)
            return 1
        print(f"  ✓ Saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
