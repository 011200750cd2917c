# tablegrid/core/processor/rules_helper/rule_evaluator.py
"""
Rule Evaluator - Condition Operator Dispatch

Evaluates a rule's ``when`` against the comparable value of a cell.

Each ConditionOperator has exactly one handler in OPERATOR_HANDLERS; a
missing handler fails at import time rather than falling through to "no
match" at runtime.

Operator families:
- text:    isEmpty, isNotEmpty, equals, notEquals, equalsIgnoreCase,
           contains, notContains, startsWith, endsWith, inList, notInList
- numeric: greaterThan(OrEqual), lessThan(OrEqual), between, notBetween
- date:    before, after, on, betweenDates

Numeric and date operators need both the cell and the operand(s) to parse;
anything unparseable evaluates to False. Evaluation never raises.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from tablegrid.core.functions.table_model import Cell
from tablegrid.core.functions.value_parser import ComparableValue, ValueParser, parse_date, parse_number
from tablegrid.core.processor.rules_helper.rule_models import (
    ConditionGroup,
    ConditionLogic,
    ConditionOperator,
    ConditionRule,
    ConditionWhen,
    RuleWhen,
)

logger = logging.getLogger("table-grid")

Handler = Callable[[ConditionWhen, ComparableValue], bool]


# ============================================================================
# Operand helpers
# ============================================================================

def _text_pair(when: ConditionWhen, v: ComparableValue):
    """Cell text and operand, lowered when the condition ignores case."""
    if when.ignore_case:
        return v.text_lower, when.value.lower()
    return v.text, when.value


def _list_operand(when: ConditionWhen) -> List[str]:
    if when.values is not None:
        items = when.values
    else:
        items = [part.strip() for part in when.value.split(",")]
        items = [part for part in items if part]
    if when.ignore_case:
        return [item.lower() for item in items]
    return items


def _utc_day(ms: float):
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc).date()


def _range(low: Optional[float], high: Optional[float]):
    if low is None or high is None:
        return None
    return min(low, high), max(low, high)


# ============================================================================
# Text handlers
# ============================================================================

def _is_empty(when: ConditionWhen, v: ComparableValue) -> bool:
    return len(v.text) == 0


def _is_not_empty(when: ConditionWhen, v: ComparableValue) -> bool:
    return len(v.text) > 0


def _equals(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return cur == operand


def _not_equals(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return cur != operand


def _equals_ignore_case(when: ConditionWhen, v: ComparableValue) -> bool:
    return v.text_lower == when.value.lower()


def _contains(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return operand in cur


def _not_contains(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return operand not in cur


def _starts_with(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return cur.startswith(operand)


def _ends_with(when: ConditionWhen, v: ComparableValue) -> bool:
    cur, operand = _text_pair(when, v)
    return cur.endswith(operand)


def _in_list(when: ConditionWhen, v: ComparableValue) -> bool:
    cur = v.text_lower if when.ignore_case else v.text
    return cur in _list_operand(when)


def _not_in_list(when: ConditionWhen, v: ComparableValue) -> bool:
    cur = v.text_lower if when.ignore_case else v.text
    return cur not in _list_operand(when)


# ============================================================================
# Numeric handlers
# ============================================================================

def _numeric(compare: Callable[[float, float], bool]) -> Handler:
    def handler(when: ConditionWhen, v: ComparableValue) -> bool:
        operand = parse_number(when.value)
        if v.num is None or operand is None:
            return False
        return compare(v.num, operand)
    return handler


def _between(when: ConditionWhen, v: ComparableValue) -> bool:
    bounds = _range(parse_number(when.min), parse_number(when.max))
    if v.num is None or bounds is None:
        return False
    return bounds[0] <= v.num <= bounds[1]


def _not_between(when: ConditionWhen, v: ComparableValue) -> bool:
    bounds = _range(parse_number(when.min), parse_number(when.max))
    if v.num is None or bounds is None:
        return False
    return not bounds[0] <= v.num <= bounds[1]


# ============================================================================
# Date handlers
# ============================================================================

def _before(when: ConditionWhen, v: ComparableValue) -> bool:
    operand = parse_date(when.value)
    return v.date_ms is not None and operand is not None and v.date_ms < operand


def _after(when: ConditionWhen, v: ComparableValue) -> bool:
    operand = parse_date(when.value)
    return v.date_ms is not None and operand is not None and v.date_ms > operand


def _on(when: ConditionWhen, v: ComparableValue) -> bool:
    operand = parse_date(when.value)
    if v.date_ms is None or operand is None:
        return False
    return _utc_day(v.date_ms) == _utc_day(operand)


def _between_dates(when: ConditionWhen, v: ComparableValue) -> bool:
    bounds = _range(parse_date(when.min), parse_date(when.max))
    if v.date_ms is None or bounds is None:
        return False
    return bounds[0] <= v.date_ms <= bounds[1]


OPERATOR_HANDLERS: Dict[ConditionOperator, Handler] = {
    ConditionOperator.IS_EMPTY: _is_empty,
    ConditionOperator.IS_NOT_EMPTY: _is_not_empty,
    ConditionOperator.EQUALS: _equals,
    ConditionOperator.NOT_EQUALS: _not_equals,
    ConditionOperator.EQUALS_IGNORE_CASE: _equals_ignore_case,
    ConditionOperator.CONTAINS: _contains,
    ConditionOperator.NOT_CONTAINS: _not_contains,
    ConditionOperator.STARTS_WITH: _starts_with,
    ConditionOperator.ENDS_WITH: _ends_with,
    ConditionOperator.IN_LIST: _in_list,
    ConditionOperator.NOT_IN_LIST: _not_in_list,
    ConditionOperator.GREATER_THAN: _numeric(lambda a, b: a > b),
    ConditionOperator.GREATER_THAN_OR_EQUAL: _numeric(lambda a, b: a >= b),
    ConditionOperator.LESS_THAN: _numeric(lambda a, b: a < b),
    ConditionOperator.LESS_THAN_OR_EQUAL: _numeric(lambda a, b: a <= b),
    ConditionOperator.BETWEEN: _between,
    ConditionOperator.NOT_BETWEEN: _not_between,
    ConditionOperator.BEFORE: _before,
    ConditionOperator.AFTER: _after,
    ConditionOperator.ON: _on,
    ConditionOperator.BETWEEN_DATES: _between_dates,
}

_missing = set(ConditionOperator) - set(OPERATOR_HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for condition operators: {sorted(op.value for op in _missing)}")


# ============================================================================
# Evaluator
# ============================================================================

class RuleEvaluator:
    """Match rules against cells using a shared ValueParser."""

    def __init__(self, value_parser: Optional[ValueParser] = None):
        self.value_parser = value_parser or ValueParser()

    def evaluate_when(self, when: Optional[RuleWhen], value: ComparableValue) -> bool:
        """
        Evaluate a condition or condition group against a comparable value.

        An empty group never matches.
        """
        if when is None:
            return False
        if isinstance(when, ConditionGroup):
            if not when.conditions:
                return False
            results = (self._evaluate_condition(c, value) for c in when.conditions)
            return all(results) if when.logic == ConditionLogic.AND else any(results)
        return self._evaluate_condition(when, value)

    def evaluate_rule_match(self, rule: Optional[ConditionRule], cell: Optional[Cell]) -> bool:
        """
        Check whether a rule matches a cell.

        Args:
            rule: Rule (model or persisted dict)
            cell: Cell whose own markup is compared

        Returns:
            False for disabled rules, rules without a condition, unknown
            operators and unparseable operands
        """
        if rule is None:
            return False
        if isinstance(rule, dict):
            rule = ConditionRule.from_dict(rule)
        if not rule.enabled or rule.when is None:
            return False
        if isinstance(cell, dict):
            cell = Cell.from_dict(cell)
        return self.evaluate_when(rule.when, self.value_parser.comparable_value(cell))

    @staticmethod
    def _evaluate_condition(when: ConditionWhen, value: ComparableValue) -> bool:
        if when.op is None:
            return False
        return OPERATOR_HANDLERS[when.op](when, value)


def create_rule_evaluator(value_parser: Optional[ValueParser] = None) -> RuleEvaluator:
    """
    Factory function to create a RuleEvaluator.

    Args:
        value_parser: Parser whose text cache the evaluator shares

    Returns:
        RuleEvaluator instance
    """
    return RuleEvaluator(value_parser)
