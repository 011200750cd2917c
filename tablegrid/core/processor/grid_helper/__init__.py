# tablegrid/core/processor/grid_helper/__init__.py
"""
Grid Helper Module

Structure of a table grid: who owns a covered cell, how many rows are
header rows, and which columns (and split leaf columns) exist.

Module Components:
- covered_cell_resolver: Bounded coveredBy chain walking
- header_layers: Split header cell decomposition into name layers
- header_depth: Two-stage header row count inference
- column_catalog: Column entries, keys and rendered leaf paths
"""

from tablegrid.core.processor.grid_helper.covered_cell_resolver import (
    CoveredCellResolver,
    resolve_covered_cell,
)

from tablegrid.core.processor.grid_helper.header_layers import HeaderLayerBuilder

from tablegrid.core.processor.grid_helper.header_depth import (
    HeaderDepthInferer,
    infer_header_row_count,
)

from tablegrid.core.processor.grid_helper.column_catalog import (
    ColumnCatalog,
    ColumnCatalogBuilder,
    ColumnEntry,
    ColumnTarget,
    build_column_catalog,
    leaf_col_path_for_rendered_cell,
    leaf_column_key,
    parse_column_key,
    parse_leaf_path,
)

__all__ = [
    # Covered cells
    "CoveredCellResolver",
    "resolve_covered_cell",
    # Header layers / depth
    "HeaderLayerBuilder",
    "HeaderDepthInferer",
    "infer_header_row_count",
    # Column catalog
    "ColumnCatalog",
    "ColumnCatalogBuilder",
    "ColumnEntry",
    "ColumnTarget",
    "build_column_catalog",
    "leaf_col_path_for_rendered_cell",
    "leaf_column_key",
    "parse_column_key",
    "parse_leaf_path",
]
