# tablegrid/core/processor/grid_helper/header_layers.py
"""
Header Layers - Split Cell Decomposition

A header cell contributes one or more "layers" to a column name. A plain
cell is a single layer; a split cell contributes one layer per split row.

    split rows=2 cols=2           layers (whole column)   layers (leaf [1])
    ┌─────┬─────┐
    │  f  │  s  │                 "f / s"                 "s"
    ├─────┼─────┤
    │  b  │  r  │                 "b / r"                 "r"
    └─────┴─────┘

Leaf column paths are the split-column indices met while descending only
through splits with cols > 1. A cols == 1 split stacks labels vertically,
so it adds depth to the name but nothing to the path.

All recursion is bounded by config.max_split_depth; anything deeper is
treated as empty.
"""
import logging
from typing import List, Optional, Sequence

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Cell
from tablegrid.core.functions.utils import dedupe_consecutive, dedupe_preserving_order
from tablegrid.core.functions.value_parser import ValueParser

logger = logging.getLogger("table-grid")


class HeaderLayerBuilder:
    """Turn header cells into name layers and leaf column paths."""

    def __init__(self, value_parser: ValueParser, config: Optional[TableGridConfig] = None):
        self.value_parser = value_parser
        self.config = config or DEFAULT_GRID_CONFIG

    def cell_label(self, cell: Optional[Cell]) -> str:
        """Single-string label of a cell: its layers joined like a column name."""
        return self.config.layer_separator.join(self.whole_layers(cell))

    def compact_label(self, cell: Optional[Cell], depth: int) -> str:
        """Collapse a (possibly split) cell into one label for use inside a split row."""
        return self.config.part_separator.join(self.whole_layers(cell, depth))

    def whole_layers(self, cell: Optional[Cell], depth: int = 0) -> List[str]:
        """
        Layers of a header cell when naming the whole top-level column.

        Args:
            cell: Resolved header cell
            depth: Current split nesting depth

        Returns:
            Up to config.max_header_layers layers, top to bottom
        """
        if cell is None or self._too_deep(depth):
            return []

        split = cell.split
        if split is None:
            own = self.value_parser.to_text(cell.content)
            return [own] if own else []

        layers: List[str] = []
        for r in range(split.rows):
            row_parts = []
            for c in range(split.cols):
                txt = self.compact_label(split.cell_at(r, c), depth + 1)
                if txt:
                    row_parts.append(txt)
            unique = dedupe_preserving_order(row_parts)
            if unique:
                layers.append(self.config.part_separator.join(unique))

        return layers[:self.config.max_header_layers]

    def leaf_layers(self, cell: Optional[Cell], leaf_path: Sequence[int], depth: int = 0) -> List[str]:
        """
        Layers of a header cell above one leaf column.

        Descends into the split column named by the next leaf path index at
        every cols > 1 split, and through the single column of cols == 1
        splits without consuming an index.
        """
        if cell is None or self._too_deep(depth):
            return []

        split = cell.split
        if split is None:
            own = self.value_parser.to_text(cell.content)
            return [own] if own else []

        path = list(leaf_path or [])
        if split.cols > 1:
            pick = path[0] if path else 0
            rest = path[1:]
            if not 0 <= pick < split.cols:
                pick = 0
        else:
            pick = 0
            rest = path

        layers = []
        for r in range(split.rows):
            sub_layers = self.leaf_layers(split.cell_at(r, pick), rest, depth + 1)
            txt = self.config.part_separator.join(sub_layers)
            if txt:
                layers.append(txt)

        return dedupe_consecutive(layers)[:self.config.max_header_layers]

    def leaf_col_paths(self, cell: Optional[Cell], depth: int = 0) -> List[List[int]]:
        """
        Every leaf column path below a cell, in discovery order.

        An unsplit cell or a split whose columns are all cols == 1 yields no
        paths.
        """
        if cell is None or self._too_deep(depth):
            return []
        split = cell.split
        if split is None:
            return []

        out: List[List[int]] = []
        if split.cols > 1:
            for c in range(split.cols):
                nested = self._union_paths(
                    self.leaf_col_paths(split.cell_at(r, c), depth + 1) for r in range(split.rows)
                )
                if not nested:
                    out.append([c])
                else:
                    out.extend([c] + p for p in nested)
            return out

        return self._union_paths(
            self.leaf_col_paths(split.cell_at(r, 0), depth + 1) for r in range(split.rows)
        )

    def _too_deep(self, depth: int) -> bool:
        if depth > self.config.max_split_depth:
            logger.debug(f"Split nesting exceeded {self.config.max_split_depth} levels; truncating")
            return True
        return False

    @staticmethod
    def _union_paths(groups) -> List[List[int]]:
        seen = set()
        out = []
        for group in groups:
            for path in group:
                key = tuple(path)
                if key in seen:
                    continue
                seen.add(key)
                out.append(list(path))
        return out
