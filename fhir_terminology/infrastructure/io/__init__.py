"""Input adapters.

Readers for the JSON and CSV files terminology resources are loaded from.
"""

from .csv_reader import CSVReader, CSVReadOptions
from .exceptions import (
    DataParseError,
    DataSourceError,
    DataSourceNotFoundError,
    TerminologyInfrastructureError,
)
from .json_reader import read_json_object

__all__ = [
    "CSVReadOptions",
    "CSVReader",
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "TerminologyInfrastructureError",
    "read_json_object",
]
