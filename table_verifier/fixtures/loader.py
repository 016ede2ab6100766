"""Loading fixture files into ordered records."""

import json
import logging
from pathlib import Path
from typing import List, Union

from ..core.errors import FixtureParseError
from ..core.schema import Record, TableSchema

logger = logging.getLogger(__name__)


def read_fixture_document(path: Union[str, Path]):
    """
    Read and parse a fixture JSON file.

    Args:
        path: Path to the fixture file

    Returns:
        The parsed JSON document

    Raises:
        FixtureParseError: If the file is missing, unreadable, or not JSON
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise FixtureParseError(str(path), "Fixture file not found")
    except (OSError, UnicodeDecodeError) as e:
        raise FixtureParseError(str(path), f"Cannot read fixture file: {e}")
    except json.JSONDecodeError as e:
        raise FixtureParseError(str(path), f"Invalid JSON: {e}")


def load_fixture(path: Union[str, Path], schema: TableSchema) -> List[Record]:
    """
    Load a fixture file as records described by a schema.

    Args:
        path: Path to the fixture file
        schema: Schema whose parse_records hook shapes the records

    Returns:
        Records in file order

    Raises:
        FixtureParseError: If the file cannot be read or does not match
            the schema's expected layout
    """
    document = read_fixture_document(path)
    records = schema.parse_records(document, source=str(path))
    logger.debug("Loaded %d records from %s", len(records), path)
    return records
