# tablegrid/core/processor/rules_helper/conditional_formatter.py
"""
Conditional Formatter - Rule Sets to Cell Style Patches

Resolves which column rule sets apply to a body cell and merges the effects
of every matching rule into one ConditionThen patch.

================================================================================
PROCESSING FLOW
================================================================================

get_conditional_then_for_cell(r, c, cell, rule_sets, rows, header_rows, path)
│
├─ r < header_rows  ──► None
│
├─ rendered leaf path  ◄── leaf_col_path_for_rendered_cell(rows, r, c, path)
│
├─ for each enabled rule set with rules:
│   ├─ resolve target
│   │   1. explicit target / positional columnKey (col:N, leafcol:N:p)
│   │   2. fallbackColIndex / colIndex (+ leafColPath)
│   │   3. column catalog lookup of columnKey / columnName
│   ├─ target.top_col_index != c         ──► skip
│   └─ leaf target
│       ├─ rendered path present and different  ──► skip
│       └─ unsplit cell                         ──► config flag decides
│
├─ whole-column sets first, then leaf sets
│
└─ per set: rules by ascending priority, merge each match,
            stopIfTrue ends the set

================================================================================
MERGE POLICY
================================================================================

backgroundColor, textColor, fontWeight, fontStyle, textDecoration:
    the later match wins whenever it defines the field
cellClass, tooltip:
    the later match wins only with a non-empty value

Usage Example:
    formatter = create_conditional_formatter()
    style = formatter.get_conditional_cell_style(
        3, 2, cell, table.column_rules, table.rows, header_row_count=1
    )
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Cell, Row, as_rows
from tablegrid.core.functions.value_parser import ValueParser
from tablegrid.core.processor.grid_helper.column_catalog import (
    ColumnCatalog,
    ColumnCatalogBuilder,
    ColumnTarget,
    leaf_col_path_for_rendered_cell,
    parse_column_key,
)
from tablegrid.core.processor.rules_helper.rule_evaluator import RuleEvaluator
from tablegrid.core.processor.rules_helper.rule_models import ColumnRuleSet, ConditionThen

logger = logging.getLogger("table-grid")


class TableConditionalFormatter:
    """
    Conditional formatting engine for one table widget.

    Owns the ValueParser (and its markup cache) shared by rule evaluation
    and column catalog lookups; call clear_cache() when the widget goes away.
    """

    def __init__(
        self,
        value_parser: Optional[ValueParser] = None,
        config: Optional[TableGridConfig] = None,
    ):
        self.config = config or DEFAULT_GRID_CONFIG
        self.value_parser = value_parser or ValueParser()
        self.evaluator = RuleEvaluator(self.value_parser)
        self.catalog_builder = ColumnCatalogBuilder(self.value_parser, self.config)

    # ========================================================================
    # Target resolution
    # ========================================================================

    def resolve_rule_set_target(
        self,
        rule_set: ColumnRuleSet,
        catalog: Optional[ColumnCatalog] = None,
    ) -> Optional[ColumnTarget]:
        """
        Resolve the column a rule set applies to.

        Args:
            rule_set: Rule set to resolve
            catalog: Column catalog for name lookups (skipped when None)

        Returns:
            ColumnTarget, or None when the rule set cannot be placed
        """
        if rule_set.target is not None:
            return rule_set.target

        parsed = parse_column_key(rule_set.column_key)
        if parsed is not None:
            return parsed

        for index in (rule_set.fallback_col_index, rule_set.col_index):
            if index is not None and index >= 0:
                return ColumnTarget(index, rule_set.leaf_col_path)

        if catalog is not None:
            for key in (rule_set.column_key, rule_set.column_name):
                target = catalog.lookup(key)
                if target is not None:
                    return target

        return None

    @staticmethod
    def _needs_catalog(rule_set: ColumnRuleSet) -> bool:
        return (
            rule_set.target is None
            and parse_column_key(rule_set.column_key) is None
            and rule_set.fallback_col_index is None
            and rule_set.col_index is None
        )

    # ========================================================================
    # Evaluation
    # ========================================================================

    def evaluate_rule_match(self, rule: Any, cell: Any) -> bool:
        return self.evaluator.evaluate_rule_match(rule, cell)

    def get_conditional_then_for_cell(
        self,
        row_index: int,
        col_index: int,
        cell: Any,
        rule_sets: Optional[Sequence[Any]],
        rows: Sequence[Any],
        header_row_count: int,
        path: str = "",
    ) -> Optional[ConditionThen]:
        """
        Merge the effects of every matching rule for one rendered cell.

        Args:
            row_index: Top-level row of the cell
            col_index: Top-level column of the cell
            cell: The rendered cell (model or dict); for split cells, the sub-cell
            rule_sets: Column rule sets (models or persisted dicts)
            rows: Grid rows (models or dicts)
            header_row_count: Header depth; rows above it are never formatted
            path: Rendered sub-cell path inside a split cell ("" when unsplit)

        Returns:
            The merged ConditionThen, or None when nothing applies
        """
        if header_row_count > 0 and row_index < header_row_count:
            return None
        if not rule_sets:
            return None

        rows = rows or []
        grid: List[Row] = rows if all(isinstance(r, Row) for r in rows) else as_rows(list(rows))
        if isinstance(cell, dict):
            cell = Cell.from_dict(cell)

        rendered = leaf_col_path_for_rendered_cell(grid, row_index, col_index, path)
        rendered_leaf = tuple(rendered) if rendered else None

        whole_sets: List[ColumnRuleSet] = []
        leaf_sets: List[ColumnRuleSet] = []
        catalog: Optional[ColumnCatalog] = None

        for raw in rule_sets:
            rule_set = ColumnRuleSet.from_dict(raw)
            if not rule_set.enabled or not rule_set.rules:
                continue

            if catalog is None and self._needs_catalog(rule_set):
                catalog = self.catalog_builder.build(grid, header_row_count)
            target = self.resolve_rule_set_target(rule_set, catalog)
            if target is None:
                logger.debug(
                    f"Rule set {rule_set.column_key or rule_set.column_name!r} has no resolvable column; ignoring"
                )
                continue
            if target.top_col_index != col_index:
                continue

            if target.kind == "leaf":
                if rendered_leaf is not None:
                    if rendered_leaf != target.leaf_path:
                        continue
                elif not self.config.leaf_rules_apply_to_unsplit_cells:
                    continue
                leaf_sets.append(rule_set)
            else:
                whole_sets.append(rule_set)

        if not whole_sets and not leaf_sets:
            return None

        out = ConditionThen()
        for rule_set in whole_sets + leaf_sets:
            out = self._apply_rule_set(rule_set, cell, out)

        return None if out.is_empty() else out

    def _apply_rule_set(self, rule_set: ColumnRuleSet, cell: Optional[Cell], out: ConditionThen) -> ConditionThen:
        # sorted() is stable: equal priorities keep their saved order
        for rule in sorted(rule_set.rules, key=lambda r: r.priority):
            if not rule.enabled:
                continue
            if not self.evaluator.evaluate_rule_match(rule, cell):
                continue
            out = out.merged(rule.then)
            if rule.stop_if_true:
                break
        return out

    # ========================================================================
    # Projections
    # ========================================================================

    def get_conditional_cell_class(self, *args, **kwargs) -> Optional[str]:
        """CSS class of the merged patch, or None."""
        then = self.get_conditional_then_for_cell(*args, **kwargs)
        return (then.cell_class or None) if then else None

    def get_conditional_cell_style(self, *args, **kwargs) -> Dict[str, str]:
        """Inline style of the merged patch; only defined properties are present."""
        then = self.get_conditional_then_for_cell(*args, **kwargs)
        return then.to_style() if then else {}

    def get_conditional_tooltip(self, *args, **kwargs) -> Optional[str]:
        """Tooltip of the merged patch, or None."""
        then = self.get_conditional_then_for_cell(*args, **kwargs)
        return (then.tooltip or None) if then else None

    def clear_cache(self) -> None:
        """Release the markup cache (call on widget teardown)."""
        self.value_parser.clear_cache()


def create_conditional_formatter(
    value_parser: Optional[ValueParser] = None,
    config: Optional[TableGridConfig] = None,
) -> TableConditionalFormatter:
    """
    Factory function to create a TableConditionalFormatter.

    Args:
        value_parser: Parser to share (a new one is created if None)
        config: Grid configuration (DEFAULT_GRID_CONFIG if None)

    Returns:
        TableConditionalFormatter instance
    """
    return TableConditionalFormatter(value_parser, config)
