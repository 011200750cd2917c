# tablegrid/core/processor/rules_helper/rule_models.py
"""
Rule Models - Conditional Formatting Definitions

Data classes for the column rule sets persisted with a table widget.

Module Components:
- ConditionOperator: closed set of supported operators
- ConditionWhen: one condition (operator + operands + case flag)
- ConditionGroup: and/or combination of conditions
- ConditionThen: style / class / tooltip patch applied on match
- ConditionRule: when + then + priority + stopIfTrue + enabled
- ColumnRuleSet: rules bound to one column or leaf column

Persisted JSON uses camelCase names (``stopIfTrue``, ``fallbackColIndex``);
``from_dict`` reads them and tolerates missing or malformed fields.
"""
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from tablegrid.core.functions.table_model import coerce_int
from tablegrid.core.processor.grid_helper.column_catalog import ColumnTarget, parse_leaf_path

logger = logging.getLogger("table-grid")


class ConditionOperator(Enum):
    """Supported condition operators (persisted values are camelCase)."""
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    EQUALS_IGNORE_CASE = "equalsIgnoreCase"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IN_LIST = "inList"
    NOT_IN_LIST = "notInList"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    BETWEEN = "between"
    NOT_BETWEEN = "notBetween"
    BEFORE = "before"
    AFTER = "after"
    ON = "on"
    BETWEEN_DATES = "betweenDates"

    @classmethod
    def parse(cls, value: Any) -> Optional['ConditionOperator']:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            if value:
                logger.debug(f"Unknown condition operator: {value!r}")
            return None


class ConditionLogic(Enum):
    AND = "and"
    OR = "or"


def _operand(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class ConditionWhen:
    """A single condition.

    Attributes:
        op: Operator, None when missing or unknown (never matches)
        value: Single operand as text
        min: Lower range operand as text
        max: Upper range operand as text
        values: Explicit list operand (inList/notInList)
        ignore_case: Case-insensitive text comparison (default True)
        value_type: Persisted operand type hint, informational only
    """
    op: Optional[ConditionOperator] = None
    value: str = ""
    min: str = ""
    max: str = ""
    values: Optional[List[str]] = None
    ignore_case: bool = True
    value_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'ConditionWhen':
        if isinstance(data, ConditionWhen):
            return data
        if not isinstance(data, dict):
            return cls()
        values = data.get("values")
        return cls(
            op=ConditionOperator.parse(data.get("op")),
            value=_operand(data.get("value")),
            min=_operand(data.get("min")),
            max=_operand(data.get("max")),
            values=[_operand(v) for v in values] if isinstance(values, list) else None,
            ignore_case=data.get("ignoreCase") is not False,
            value_type=data.get("valueType") if isinstance(data.get("valueType"), str) else None,
        )


@dataclass
class ConditionGroup:
    """Conditions combined with "and" (all must match) or "or" (any may match)."""
    logic: ConditionLogic = ConditionLogic.AND
    conditions: List[ConditionWhen] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConditionGroup':
        conditions = data.get("conditions")
        return cls(
            logic=ConditionLogic.OR if data.get("logic") == "or" else ConditionLogic.AND,
            conditions=[ConditionWhen.from_dict(c) for c in conditions] if isinstance(conditions, list) else [],
        )


RuleWhen = Union[ConditionWhen, ConditionGroup]


def parse_when(data: Any) -> Optional[RuleWhen]:
    if isinstance(data, (ConditionWhen, ConditionGroup)):
        return data
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("conditions"), list):
        return ConditionGroup.from_dict(data)
    return ConditionWhen.from_dict(data)


# camelCase persisted name -> attribute
_THEN_FIELDS = {
    "cellClass": "cell_class",
    "backgroundColor": "background_color",
    "textColor": "text_color",
    "fontWeight": "font_weight",
    "fontStyle": "font_style",
    "textDecoration": "text_decoration",
    "tooltip": "tooltip",
}

# Fields a later match may only override with a non-empty value.
_STICKY_FIELDS = ("cell_class", "tooltip")


@dataclass
class ConditionThen:
    """Effects applied to a cell when a rule matches."""
    cell_class: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    font_weight: Optional[str] = None
    font_style: Optional[str] = None
    text_decoration: Optional[str] = None
    tooltip: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'ConditionThen':
        if isinstance(data, ConditionThen):
            return data
        if not isinstance(data, dict):
            return cls()
        kwargs = {}
        for persisted, attr in _THEN_FIELDS.items():
            value = data.get(persisted)
            if value is not None:
                kwargs[attr] = str(value)
        return cls(**kwargs)

    def merged(self, later: 'ConditionThen') -> 'ConditionThen':
        """
        Merge a later match into this accumulator.

        Style fields take the later value whenever it is defined (an empty
        string included). cellClass and tooltip take the later value only
        when it is non-empty, so an empty class never clears an earlier one.
        """
        out = {}
        for f in fields(self):
            current = getattr(self, f.name)
            incoming = getattr(later, f.name)
            if f.name in _STICKY_FIELDS:
                out[f.name] = incoming if incoming else current
            else:
                out[f.name] = incoming if incoming is not None else current
        return ConditionThen(**out)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, str]:
        out = {}
        for persisted, attr in _THEN_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[persisted] = value
        return out

    def to_style(self) -> Dict[str, str]:
        """Inline style patch (textColor maps to "color"); unset properties are omitted."""
        style = {
            "backgroundColor": self.background_color,
            "color": self.text_color,
            "fontWeight": self.font_weight,
            "fontStyle": self.font_style,
            "textDecoration": self.text_decoration,
        }
        return {k: v for k, v in style.items() if v is not None}


@dataclass
class ConditionRule:
    """A prioritized conditional formatting rule."""
    id: str = ""
    when: Optional[RuleWhen] = None
    then: ConditionThen = field(default_factory=ConditionThen)
    priority: float = 0
    stop_if_true: bool = False
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> 'ConditionRule':
        if isinstance(data, ConditionRule):
            return data
        if not isinstance(data, dict):
            return cls(enabled=False)
        priority = data.get("priority")
        if isinstance(priority, bool) or not isinstance(priority, (int, float)) or priority != priority:
            priority = 0
        return cls(
            id=str(data.get("id") or ""),
            when=parse_when(data.get("when")),
            then=ConditionThen.from_dict(data.get("then")),
            priority=priority,
            stop_if_true=bool(data.get("stopIfTrue")),
            enabled=data.get("enabled") is not False,
        )


@dataclass
class ColumnRuleSet:
    """Rules bound to one column (or one leaf column).

    The target column is resolved from, in order: an explicit ``target``
    or a positional ``columnKey`` ("col:3", "leafcol:2:0"), then
    ``fallbackColIndex`` / ``colIndex``, then a name lookup of
    ``columnKey`` / ``columnName`` in the column catalog.

    Attributes:
        rules: Ordered rules, evaluated by ascending priority
        column_key: Saved column key
        column_name: Saved human-readable column name
        display_name: Optional label captured when saved
        col_index: Saved column index
        fallback_col_index: Preferred saved column index
        leaf_col_path: Leaf column path inside the target column
        target: Explicit structured target
        enabled: Disabled rule sets apply to nothing
        match_mode: Persisted "any"/"all", carried as-is
    """
    rules: List[ConditionRule] = field(default_factory=list)
    column_key: str = ""
    column_name: str = ""
    display_name: str = ""
    col_index: Optional[int] = None
    fallback_col_index: Optional[int] = None
    leaf_col_path: Optional[tuple] = None
    target: Optional[ColumnTarget] = None
    enabled: bool = True
    match_mode: str = "any"

    @classmethod
    def from_dict(cls, data: Any) -> 'ColumnRuleSet':
        if isinstance(data, ColumnRuleSet):
            return data
        if not isinstance(data, dict):
            return cls(enabled=False)
        rules = data.get("rules")
        return cls(
            rules=[ConditionRule.from_dict(r) for r in rules] if isinstance(rules, list) else [],
            column_key=str(data.get("columnKey") or ""),
            column_name=str(data.get("columnName") or ""),
            display_name=str(data.get("displayName") or ""),
            col_index=coerce_int(data.get("colIndex")),
            fallback_col_index=coerce_int(data.get("fallbackColIndex")),
            leaf_col_path=parse_leaf_path(data.get("leafColPath")),
            target=ColumnTarget.from_dict(data.get("target")),
            enabled=data.get("enabled") is not False,
            match_mode="all" if data.get("matchMode") == "all" else "any",
        )
