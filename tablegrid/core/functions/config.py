# tablegrid/core/functions/config.py
"""
Grid Config - Guard Constants and Heuristic Thresholds

Every traversal in this package is bounded by a small guard so that
malformed or cyclic persisted documents degrade to a best-effort answer
instead of looping. The header heuristic thresholds are tuning values that
existing documents depend on; change them only together with the documents.

Usage Example:
    from tablegrid.core.functions.config import TableGridConfig

    config = TableGridConfig(leaf_rules_apply_to_unsplit_cells=True)
"""
from dataclasses import dataclass


class TableGridConfigError(ValueError):
    """Raised when a TableGridConfig is built with unusable values."""


@dataclass
class TableGridConfig:
    """Configuration for grid traversal, header inference and rule evaluation.

    Attributes:
        max_cover_hops: Hops allowed while following coveredBy references
        max_split_depth: Nesting depth allowed while descending into splits
        max_header_rows: Upper bound for header depth
        max_header_layers: Layers kept from a single split header cell
        numeric_ratio_strict: Numeric ratio marking a row beyond the persisted
            header count as body (with at least one non-empty label)
        numeric_ratio_loose: Numeric ratio marking any row as body
            (with at least two non-empty labels)
        leaf_rules_apply_to_unsplit_cells: Apply leaf-targeted rule sets to
            body cells that are not split at all
        layer_separator: Joins header layers into a column name
        part_separator: Joins sibling labels inside one split row
    """
    max_cover_hops: int = 6
    max_split_depth: int = 6
    max_header_rows: int = 4
    max_header_layers: int = 4
    numeric_ratio_strict: float = 0.9
    numeric_ratio_loose: float = 0.7
    leaf_rules_apply_to_unsplit_cells: bool = False
    layer_separator: str = " > "
    part_separator: str = " / "

    def __post_init__(self):
        for name in ("max_cover_hops", "max_split_depth", "max_header_rows", "max_header_layers"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise TableGridConfigError(f"{name} must be a positive integer, got {value!r}")
        for name in ("numeric_ratio_strict", "numeric_ratio_loose"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise TableGridConfigError(f"{name} must be within [0, 1], got {value!r}")


# Default configuration
DEFAULT_GRID_CONFIG = TableGridConfig()
