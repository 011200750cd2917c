# tablegrid/core/processor/__init__.py
"""
Processor - Grid and Rule Processing Module

Helper Modules (subdirectories):
- grid_helper/: covered-cell resolution, header layers, header depth
  inference and the column catalog
- rules_helper/: rule models, operator evaluation and the conditional
  formatter

Usage Example:
    from tablegrid.core.processor import ColumnCatalogBuilder
    from tablegrid.core.processor import TableConditionalFormatter
"""

# === Grid helpers ===
from tablegrid.core.processor.grid_helper import (
    CoveredCellResolver,
    HeaderDepthInferer,
    ColumnCatalogBuilder,
    ColumnCatalog,
    ColumnEntry,
    ColumnTarget,
)

# === Rule helpers ===
from tablegrid.core.processor.rules_helper import (
    RuleEvaluator,
    TableConditionalFormatter,
    create_conditional_formatter,
)

__all__ = [
    # Grid helpers
    "CoveredCellResolver",
    "HeaderDepthInferer",
    "ColumnCatalogBuilder",
    "ColumnCatalog",
    "ColumnEntry",
    "ColumnTarget",
    # Rule helpers
    "RuleEvaluator",
    "TableConditionalFormatter",
    "create_conditional_formatter",
]
