# tablegrid/core/functions/__init__.py
"""
Functions - Common Table Functions Module

Module Components:
- config: TableGridConfig guard and heuristic settings
- table_model: Cell / Row / Table data classes read from persisted JSON
- value_parser: Markup to text, number and date (ValueParser class)
- utils: Whitespace, key normalization and label helpers

Usage Example:
    from tablegrid.core.functions import Table, ValueParser
    from tablegrid.core.functions.utils import normalize_column_key
"""

from tablegrid.core.functions.config import (
    TableGridConfig,
    TableGridConfigError,
    DEFAULT_GRID_CONFIG,
)

from tablegrid.core.functions.table_model import (
    Cell,
    CellMerge,
    CellSplit,
    CoveredBy,
    Row,
    Table,
)

from tablegrid.core.functions.value_parser import (
    ComparableValue,
    ValueParser,
    create_value_parser,
    parse_date,
    parse_number,
)

from tablegrid.core.functions.utils import (
    collapse_whitespace,
    is_numeric_like,
    normalize_column_key,
)

__all__ = [
    # Config
    "TableGridConfig",
    "TableGridConfigError",
    "DEFAULT_GRID_CONFIG",
    # Table model
    "Cell",
    "CellMerge",
    "CellSplit",
    "CoveredBy",
    "Row",
    "Table",
    # Value parser
    "ComparableValue",
    "ValueParser",
    "create_value_parser",
    "parse_date",
    "parse_number",
    # Utils
    "collapse_whitespace",
    "is_numeric_like",
    "normalize_column_key",
]
