import pytest


def _cell(cell_id, text="", **extra):
    out = {"id": cell_id, "contentHtml": f"<div>{text}</div>" if text else ""}
    out.update(extra)
    return out


def _covered(cell_id, row, col):
    return {"id": cell_id, "contentHtml": "", "coveredBy": {"row": row, "col": col}}


def _split(cell_id, rows, cols, cells):
    return {
        "id": cell_id,
        "contentHtml": "",
        "split": {
            "rows": rows,
            "cols": cols,
            "cells": cells,
            "columnFractions": [1 / cols] * cols,
            "rowFractions": [1 / rows] * rows,
        },
    }


@pytest.fixture
def address_table():
    """JSON-style nested headers: id,name,username,email + address > {street..zipcode, geo > {lat,lng}}."""
    return {
        "headerRow": True,
        "rows": [
            {
                "id": "h0",
                "cells": [
                    _cell("id", "id", merge={"rowSpan": 3, "colSpan": 1}),
                    _cell("name", "name", merge={"rowSpan": 3, "colSpan": 1}),
                    _cell("username", "username", merge={"rowSpan": 3, "colSpan": 1}),
                    _cell("email", "email", merge={"rowSpan": 3, "colSpan": 1}),
                    _cell("address", "address", merge={"rowSpan": 1, "colSpan": 6}),
                    _covered("address_cov1", 0, 4),
                    _covered("address_cov2", 0, 4),
                    _covered("address_cov3", 0, 4),
                    _covered("address_cov4", 0, 4),
                    _covered("address_cov5", 0, 4),
                ],
            },
            {
                "id": "h1",
                "cells": [
                    _covered("id_cov", 0, 0),
                    _covered("name_cov", 0, 1),
                    _covered("username_cov", 0, 2),
                    _covered("email_cov", 0, 3),
                    _cell("street", "street", merge={"rowSpan": 2, "colSpan": 1}),
                    _cell("suite", "suite", merge={"rowSpan": 2, "colSpan": 1}),
                    _cell("city", "city", merge={"rowSpan": 2, "colSpan": 1}),
                    _cell("zipcode", "zipcode", merge={"rowSpan": 2, "colSpan": 1}),
                    _cell("geo", "geo", merge={"rowSpan": 1, "colSpan": 2}),
                    _covered("geo_cov", 1, 8),
                ],
            },
            {
                "id": "h2",
                "cells": [
                    _covered("id_cov2", 1, 0),
                    _covered("name_cov2", 1, 1),
                    _covered("username_cov2", 1, 2),
                    _covered("email_cov2", 1, 3),
                    _covered("street_cov", 1, 4),
                    _covered("suite_cov", 1, 5),
                    _covered("city_cov", 1, 6),
                    _covered("zipcode_cov", 1, 7),
                    _cell("lat", "lat"),
                    _cell("lng", "lng"),
                ],
            },
            {
                "id": "r3",
                "cells": [
                    _cell("v0", "1"),
                    _cell("v1", "Leanne Graham"),
                    _cell("v2", "Bret"),
                    _cell("v3", "Sincere@april.biz"),
                    _cell("v4", "Kulas Light"),
                    _cell("v5", "Apt. 556"),
                    _cell("v6", "Gwenborough"),
                    _cell("v7", "92998-3874"),
                    _cell("v8", "-37.3159"),
                    _cell("v9", "81.1496"),
                ],
            },
        ],
        "columnFractions": [0.1] * 10,
        "rowFractions": [0.25] * 4,
        "showBorders": True,
    }


@pytest.fixture
def split_header_table():
    """2x2 split header [f, s; b, r] at top column 2 of 4, body value 55 below it."""
    return {
        "headerRow": True,
        "headerRowCount": 1,
        "rows": [
            {
                "id": "r0",
                "cells": [
                    _cell("c00"),
                    _cell("c01"),
                    _split("c02", 2, 2, [_cell("f", "f"), _cell("s", "s"), _cell("b", "b"), _cell("r", "r")]),
                    _cell("c03"),
                ],
            },
            {
                "id": "r1",
                "cells": [_cell("d00"), _cell("d01"), _cell("d02", "55"), _cell("d03")],
            },
        ],
        "columnFractions": [0.25, 0.25, 0.25, 0.25],
        "rowFractions": [0.5, 0.5],
        "showBorders": True,
    }


@pytest.fixture
def nested_header_table():
    """Header d over a/b (vertical then horizontal split), a split body row 10 / 20, an unsplit body row."""
    return {
        "headerRow": True,
        "headerRowCount": 1,
        "rows": [
            {
                "id": "h0",
                "cells": [
                    _split("h0c0", 2, 1, [
                        _cell("d", "d"),
                        _split("ab", 1, 2, [_cell("a", "a"), _cell("b", "b")]),
                    ]),
                    _cell("h0c1", "x"),
                ],
            },
            {
                "id": "r1",
                "cells": [
                    _split("r1c0", 1, 2, [_cell("10", "10"), _cell("20", "20")]),
                    _cell("r1c1", "7"),
                ],
            },
            {
                "id": "r2",
                "cells": [_cell("r2c0", "unsplit"), _cell("r2c1", "8")],
            },
        ],
        "columnFractions": [0.5, 0.5],
        "rowFractions": [0.4, 0.3, 0.3],
    }


@pytest.fixture
def body_merge_table():
    """Group header "a" over two columns; the body row holds a 10 / 20 split and a stray merge anchor."""
    return {
        "headerRow": True,
        "headerRowCount": 1,
        "rows": [
            {
                "id": "h0",
                "cells": [
                    _cell("a", "a", merge={"rowSpan": 1, "colSpan": 2}),
                    _covered("a_covered", 0, 0),
                ],
            },
            {
                "id": "r1",
                "cells": [
                    _split("r1c0", 1, 2, [_cell("10", "10"), _cell("20", "20")]),
                    _cell("r1c1", merge={"rowSpan": 1, "colSpan": 1}),
                ],
            },
        ],
        "columnFractions": [0.5, 0.5],
        "rowFractions": [0.5, 0.5],
    }


@pytest.fixture
def oversized_header_table():
    """Persisted headerRowCount of 3 on a two-row header followed by a numeric body row."""
    return {
        "headerRow": True,
        "headerRowCount": 3,
        "rows": [
            {
                "id": "h0",
                "cells": [
                    _cell("a", "a", merge={"rowSpan": 1, "colSpan": 3}),
                    _covered("ab1", 0, 0),
                    _covered("ab2", 0, 0),
                    _cell("d", "d"),
                    _cell("e", "e"),
                ],
            },
            {
                "id": "h1",
                "cells": [_cell("b", "b"), _cell("f", "f"), _cell("c", "c"), _cell("d1"), _cell("e1")],
            },
            {
                "id": "r2",
                "cells": [
                    _cell("v11", "11"),
                    _cell("v12", "12"),
                    _cell("v11b", "11"),
                    _cell("v20", "20", merge={"rowSpan": 2, "colSpan": 1}),
                    _cell("ve"),
                ],
            },
        ],
        "columnFractions": [0.2] * 5,
        "rowFractions": [0.3, 0.3, 0.4],
    }


@pytest.fixture
def grouped_score_table():
    """One-row header with "Score" merged over two columns; the body row splits the score into 10 / 20."""
    return {
        "headerRow": True,
        "headerRowCount": 1,
        "rows": [
            {
                "id": "h0",
                "cells": [
                    _cell("name", "Name"),
                    _cell("score", "Score", merge={"rowSpan": 1, "colSpan": 2}),
                    _covered("score_covered", 0, 1),
                ],
            },
            {
                "id": "r1",
                "cells": [
                    _cell("bob", "Bob"),
                    _split("bob_scores", 1, 2, [_cell("s10", "10"), _cell("s20", "20")]),
                    _cell("bob_ok", "ok"),
                ],
            },
        ],
        "columnFractions": [0.4, 0.3, 0.3],
        "rowFractions": [0.5, 0.5],
    }
