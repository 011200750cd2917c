# tablegrid/core/__init__.py
"""
Core - Table Grid Processing Module

Module Components:
- table_grid: TableGrid facade bound to one table snapshot
- functions/: Table model, value parser, configuration and text utilities
- processor/: Grid and rule helpers

Usage Example:
    from tablegrid.core import TableGrid
    from tablegrid.core.processor import TableConditionalFormatter
"""

from tablegrid.core.table_grid import TableGrid, create_table_grid

__all__ = [
    "TableGrid",
    "create_table_grid",
]
