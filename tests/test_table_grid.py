import pytest

import tablegrid
from tablegrid import TableGrid, TableGridConfig, create_table_grid
from tablegrid.core.functions.table_model import Table
from tablegrid.core.functions.value_parser import ValueParser


@pytest.fixture
def priced_table():
    return {
        "headerRow": True,
        "headerRowCount": 1,
        "rows": [
            {"cells": [{"contentHtml": "<b>Item</b>"}, {"contentHtml": "<b>Price</b>"}, {"contentHtml": "Due"}]},
            {"cells": [{"contentHtml": "Apple"}, {"contentHtml": "$12"}, {"contentHtml": "2024-03-01"}]},
            {"cells": [{"contentHtml": "Pear"}, {"contentHtml": "$8"}, {"contentHtml": "2024-05-01"}]},
        ],
        "columnFractions": [0.4, 0.3, 0.3],
        "columnRules": [
            {
                "columnKey": "price",
                "columnName": "Price",
                "rules": [
                    {
                        "id": "expensive",
                        "priority": 0,
                        "when": {"op": "greaterThan", "value": "10"},
                        "then": {"backgroundColor": "#fee", "cellClass": "expensive", "tooltip": "Over budget"},
                    }
                ],
            },
            {
                "columnKey": "col:2",
                "rules": [
                    {
                        "id": "overdue",
                        "when": {"op": "before", "value": "2024-04-01"},
                        "then": {"textDecoration": "line-through", "fontStyle": "italic"},
                    }
                ],
            },
        ],
    }


class TestTableGrid:
    def test_exports(self):
        assert tablegrid.__version__
        assert set(["TableGrid", "create_table_grid", "TableGridConfig"]) <= set(tablegrid.__all__)

    def test_structure(self, address_table):
        grid = create_table_grid(address_table)

        assert grid.column_count == 10
        assert grid.header_row_count == 3
        assert grid.infer_header_row_count() == 3
        assert grid.resolve_cell(2, 0).id == "id"
        assert [e.name for e in grid.build_column_catalog()][-1] == "address > geo > lng"

    def test_accepts_model_or_snapshot(self, address_table):
        from_model = TableGrid(Table.from_dict(address_table))
        from_snapshot = TableGrid(address_table)

        assert from_model.column_count == from_snapshot.column_count == 10
        assert from_model.header_row_count == from_snapshot.header_row_count == 3

    def test_catalog_with_explicit_header_count(self, address_table):
        grid = TableGrid(address_table)
        names = [e.name for e in grid.build_column_catalog(header_row_count=1)]
        assert names[4:6] == ["address", "address"]
        assert [e.key for e in grid.build_column_catalog(header_row_count=1)][4:6] == ["address", "col:5"]

    def test_persisted_rules_are_the_default(self, priced_table):
        grid = TableGrid(priced_table)

        assert grid.get_conditional_cell_style(1, 1) == {"backgroundColor": "#fee"}
        assert grid.get_conditional_cell_class(1, 1) == "expensive"
        assert grid.get_conditional_tooltip(1, 1) == "Over budget"
        assert grid.get_conditional_then_for_cell(2, 1) is None

        assert grid.get_conditional_cell_style(1, 2) == {"textDecoration": "line-through", "fontStyle": "italic"}
        assert grid.get_conditional_cell_style(2, 2) == {}

    def test_header_rows_are_excluded(self, priced_table):
        grid = TableGrid(priced_table)
        for c in range(3):
            assert grid.get_conditional_then_for_cell(0, c) is None

    def test_header_row_disabled_formats_first_row(self, priced_table):
        priced_table["headerRow"] = False
        priced_table["columnRules"] = [
            {"colIndex": 0, "rules": [{"id": "x", "when": {"op": "isNotEmpty"}, "then": {"cellClass": "filled"}}]}
        ]
        grid = TableGrid(priced_table)

        assert grid.header_row_count == 0
        assert grid.get_conditional_cell_class(0, 0) == "filled"

    def test_explicit_rule_sets_override_persisted(self, priced_table):
        grid = TableGrid(priced_table)
        rules = [{"columnKey": "col:0", "rules": [{"id": "a", "when": {"op": "equals", "value": "pear"}, "then": {"fontWeight": "bold"}}]}]

        assert grid.get_conditional_cell_style(2, 0, rule_sets=rules) == {"fontWeight": "bold"}
        assert grid.get_conditional_cell_style(1, 1, rule_sets=rules) == {}

    def test_first_body_row_under_grouped_header_is_formatted(self, grouped_score_table):
        grid = create_table_grid(grouped_score_table)
        rules = [{"columnKey": "col:0", "rules": [{"id": "bob", "when": {"op": "equals", "value": "Bob"}, "then": {"fontWeight": "bold"}}]}]

        assert grid.header_row_count == 1
        assert grid.get_conditional_cell_style(1, 0, rule_sets=rules) == {"fontWeight": "bold"}
        assert grid.get_conditional_cell_style(0, 0, rule_sets=rules) == {}

    def test_evaluate_rule_match(self, priced_table):
        grid = TableGrid(priced_table)
        rule = {"when": {"op": "contains", "value": "app"}}
        assert grid.evaluate_rule_match(rule, grid.resolve_cell(1, 0)) is True
        assert grid.evaluate_rule_match(rule, grid.resolve_cell(2, 0)) is False

    def test_clear_cache(self, priced_table):
        parser = ValueParser()
        grid = TableGrid(priced_table, value_parser=parser)
        grid.get_conditional_then_for_cell(1, 1)
        assert parser.cache_size > 0

        grid.clear_cache()
        assert parser.cache_size == 0
        assert grid.header_row_count == 1

    def test_config_is_shared(self, nested_header_table):
        grid = TableGrid(nested_header_table, config=TableGridConfig(leaf_rules_apply_to_unsplit_cells=True))
        rules = [
            {
                "target": {"kind": "leaf", "topColIndex": 0, "leafPath": [1]},
                "rules": [{"id": "r", "when": {"op": "isNotEmpty"}, "then": {"cellClass": "leaf"}}],
            }
        ]
        assert grid.get_conditional_cell_class(2, 0, rule_sets=rules) == "leaf"
        split = grid.resolve_cell(1, 0).split
        assert grid.get_conditional_cell_class(1, 0, split.cells[1], rule_sets=rules, path="1") == "leaf"
        assert grid.get_conditional_cell_class(1, 0, split.cells[0], rule_sets=rules, path="0") is None

    def test_malformed_snapshot_degrades(self):
        grid = TableGrid("not a table")
        assert grid.column_count == 1
        assert grid.header_row_count == 0
        assert grid.build_column_catalog() == []
        assert grid.get_conditional_then_for_cell(0, 0) is None
