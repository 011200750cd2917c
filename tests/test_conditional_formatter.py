import pytest

from tablegrid.core.functions.config import TableGridConfig
from tablegrid.core.functions.table_model import Table
from tablegrid.core.processor.grid_helper.column_catalog import ColumnCatalogBuilder, ColumnTarget
from tablegrid.core.processor.rules_helper.conditional_formatter import (
    TableConditionalFormatter,
    create_conditional_formatter,
)
from tablegrid.core.processor.rules_helper.rule_models import ColumnRuleSet


def _rule(rule_id, then, when=None, **extra):
    out = {"id": rule_id, "enabled": True, "when": when or {"op": "isNotEmpty"}, "then": then}
    out.update(extra)
    return out


def _whole_red(col=0):
    return {
        "target": {"kind": "whole", "topColIndex": col},
        "rules": [_rule("red", {"backgroundColor": "red"})],
    }


def _leaf_blue(col=0, leaf=0):
    return {
        "target": {"kind": "leaf", "topColIndex": col, "leafPath": [leaf]},
        "rules": [_rule("blue", {"backgroundColor": "blue"})],
    }


@pytest.fixture
def nested(nested_header_table):
    table = Table.from_dict(nested_header_table)
    split = table.rows[1].cells[0].split
    return table, split.cells[0], split.cells[1], table.rows[2].cells[0]


class TestLeafRules:
    def test_leaf_rule_matches_by_rendered_leaf_path(self, nested):
        table, leaf10, leaf20, _ = nested
        formatter = create_conditional_formatter()
        rules = [_leaf_blue(leaf=0)]

        style10 = formatter.get_conditional_cell_style(1, 0, leaf10, rules, table.rows, 1, path="0")
        style20 = formatter.get_conditional_cell_style(1, 0, leaf20, rules, table.rows, 1, path="1")

        assert style10 == {"backgroundColor": "blue"}
        assert style20 == {}

    def test_leaf_rule_skips_unsplit_cells_by_default(self, nested):
        table, _, _, unsplit = nested
        formatter = TableConditionalFormatter()
        assert formatter.get_conditional_then_for_cell(2, 0, unsplit, [_leaf_blue()], table.rows, 1) is None

    def test_leaf_rule_applies_to_unsplit_cells_when_enabled(self, nested):
        table, _, _, unsplit = nested
        formatter = TableConditionalFormatter(config=TableGridConfig(leaf_rules_apply_to_unsplit_cells=True))
        style = formatter.get_conditional_cell_style(2, 0, unsplit, [_leaf_blue()], table.rows, 1)
        assert style == {"backgroundColor": "blue"}

    def test_leaf_rule_overrides_whole_column_rule(self, nested):
        table, leaf10, leaf20, unsplit = nested
        formatter = TableConditionalFormatter()
        # leaf set listed first; whole-column sets still apply before it
        rules = [_leaf_blue(leaf=0), _whole_red()]

        assert formatter.get_conditional_cell_style(1, 0, leaf10, rules, table.rows, 1, path="0") == {
            "backgroundColor": "blue"
        }
        assert formatter.get_conditional_cell_style(1, 0, leaf20, rules, table.rows, 1, path="1") == {
            "backgroundColor": "red"
        }
        assert formatter.get_conditional_cell_style(2, 0, unsplit, rules, table.rows, 1) == {
            "backgroundColor": "red"
        }


class TestPrecedence:
    def test_stop_if_true_ends_the_rule_set(self, nested):
        table, _, _, unsplit = nested
        rules = [
            {
                "target": {"kind": "whole", "topColIndex": 0},
                "rules": [
                    _rule("b", {"cellClass": "b"}, priority=2),
                    _rule("a", {"cellClass": "a"}, priority=1, stopIfTrue=True),
                ],
            }
        ]
        formatter = TableConditionalFormatter()
        assert formatter.get_conditional_cell_class(2, 0, unsplit, rules, table.rows, 1) == "a"

    def test_later_priority_wins_without_stop(self, nested):
        table, _, _, unsplit = nested
        rules = [
            {
                "columnKey": "col:0",
                "rules": [
                    _rule("late", {"cellClass": "late", "tooltip": ""}, priority=5),
                    _rule("early", {"cellClass": "early", "tooltip": "hint", "textColor": "#111"}, priority=1),
                ],
            }
        ]
        then = TableConditionalFormatter().get_conditional_then_for_cell(2, 0, unsplit, rules, table.rows, 1)
        assert then.cell_class == "late"
        assert then.tooltip == "hint"
        assert then.text_color == "#111"

    def test_stop_if_true_is_per_rule_set(self, nested):
        table, _, _, unsplit = nested
        rules = [
            {"columnKey": "col:0", "rules": [_rule("a", {"cellClass": "a"}, stopIfTrue=True)]},
            {"colIndex": 0, "rules": [_rule("t", {"tooltip": "second set"})]},
        ]
        formatter = TableConditionalFormatter()
        assert formatter.get_conditional_cell_class(2, 0, unsplit, rules, table.rows, 1) == "a"
        assert formatter.get_conditional_tooltip(2, 0, unsplit, rules, table.rows, 1) == "second set"

    def test_disabled_rules_and_sets_are_inert(self, nested):
        table, _, _, unsplit = nested
        rules = [
            {"columnKey": "col:0", "enabled": False, "rules": [_rule("x", {"cellClass": "x"})]},
            {"columnKey": "col:0", "rules": [_rule("y", {"cellClass": "y"}, enabled=False)]},
            {"columnKey": "col:0", "rules": []},
        ]
        assert TableConditionalFormatter().get_conditional_then_for_cell(2, 0, unsplit, rules, table.rows, 1) is None

    def test_non_matching_rules_return_none(self, nested):
        table, _, _, unsplit = nested
        rules = [{"columnKey": "col:0", "rules": [_rule("n", {"cellClass": "n"}, when={"op": "isEmpty"})]}]
        formatter = TableConditionalFormatter()
        assert formatter.get_conditional_then_for_cell(2, 0, unsplit, rules, table.rows, 1) is None
        assert formatter.get_conditional_cell_class(2, 0, unsplit, rules, table.rows, 1) is None
        assert formatter.get_conditional_cell_style(2, 0, unsplit, rules, table.rows, 1) == {}
        assert formatter.get_conditional_tooltip(2, 0, unsplit, rules, table.rows, 1) is None


class TestHeaderExclusion:
    @pytest.mark.parametrize("header_row_count", [1, 2, 3])
    def test_header_rows_are_never_formatted(self, address_table, header_row_count):
        table = Table.from_dict(address_table)
        rules = [{"columnKey": f"col:{c}", "rules": [_rule("any", {"cellClass": "hit"})]} for c in range(10)]
        formatter = TableConditionalFormatter()

        for r in range(header_row_count):
            for c in range(10):
                cell = table.cell_at(r, c)
                assert formatter.get_conditional_then_for_cell(r, c, cell, rules, table.rows, header_row_count) is None

        body = table.cell_at(3, 1)
        assert formatter.get_conditional_cell_class(3, 1, body, rules, table.rows, header_row_count) == "hit"


class TestTargetResolution:
    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"target": {"kind": "leaf", "topColIndex": 2, "leafPath": [1]}, "colIndex": 0}, ColumnTarget(2, (1,))),
            ({"columnKey": "leafcol:2:1", "colIndex": 0}, ColumnTarget(2, (1,))),
            ({"columnKey": "col:3", "fallbackColIndex": 1}, ColumnTarget(3)),
            ({"columnKey": "price", "fallbackColIndex": 1, "colIndex": 4}, ColumnTarget(1)),
            ({"colIndex": 4, "leafColPath": [0]}, ColumnTarget(4, (0,))),
            ({"columnName": "Price"}, None),
        ],
    )
    def test_resolution_order_without_catalog(self, data, expected):
        formatter = TableConditionalFormatter()
        assert formatter.resolve_rule_set_target(ColumnRuleSet.from_dict(data)) == expected

    def test_name_lookup_through_catalog(self, split_header_table):
        table = Table.from_dict(split_header_table)
        catalog = ColumnCatalogBuilder().build(table.rows, 1, table.column_count)
        formatter = TableConditionalFormatter()

        target = formatter.resolve_rule_set_target(ColumnRuleSet.from_dict({"columnName": " S  >  R "}), catalog)
        assert target == ColumnTarget(2, (1,))

    def test_rule_set_resolved_by_column_name(self):
        table = Table.from_dict(
            {
                "headerRowCount": 1,
                "rows": [
                    {"cells": [{"contentHtml": "Item"}, {"contentHtml": "Unit Price"}]},
                    {"cells": [{"contentHtml": "Apple"}, {"contentHtml": "$12"}]},
                ],
            }
        )
        rules = [
            {
                "columnName": "unit   price",
                "rules": [_rule("gt", {"textColor": "green"}, when={"op": "greaterThan", "value": "10"})],
            }
        ]
        formatter = TableConditionalFormatter()

        assert formatter.get_conditional_cell_style(1, 1, table.cell_at(1, 1), rules, table.rows, 1) == {"color": "green"}
        assert formatter.get_conditional_then_for_cell(1, 0, table.cell_at(1, 0), rules, table.rows, 1) is None

    def test_unresolvable_rule_set_applies_to_nothing(self, nested):
        table, _, _, unsplit = nested
        rules = [{"columnName": "does not exist", "rules": [_rule("x", {"cellClass": "x"})]}]
        formatter = TableConditionalFormatter()
        for c in range(2):
            assert formatter.get_conditional_then_for_cell(2, c, table.cell_at(2, c), rules, table.rows, 1) is None


class TestCache:
    def test_clear_cache_empties_parser(self, nested):
        table, _, _, unsplit = nested
        formatter = TableConditionalFormatter()
        formatter.get_conditional_then_for_cell(2, 0, unsplit, [_whole_red()], table.rows, 1)
        assert formatter.value_parser.cache_size > 0

        formatter.clear_cache()
        assert formatter.value_parser.cache_size == 0
