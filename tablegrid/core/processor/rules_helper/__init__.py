# tablegrid/core/processor/rules_helper/__init__.py
"""
Rules Helper Module

Conditional formatting: persisted rule models, operator evaluation and the
per-cell formatter.

Module Components:
- rule_models: ConditionOperator, ConditionWhen/Group/Then, ConditionRule, ColumnRuleSet
- rule_evaluator: Operator dispatch table and RuleEvaluator
- conditional_formatter: Rule set targeting, precedence and merge
"""

from tablegrid.core.processor.rules_helper.rule_models import (
    ColumnRuleSet,
    ConditionGroup,
    ConditionLogic,
    ConditionOperator,
    ConditionRule,
    ConditionThen,
    ConditionWhen,
)

from tablegrid.core.processor.rules_helper.rule_evaluator import (
    OPERATOR_HANDLERS,
    RuleEvaluator,
    create_rule_evaluator,
)

from tablegrid.core.processor.rules_helper.conditional_formatter import (
    TableConditionalFormatter,
    create_conditional_formatter,
)

__all__ = [
    # Models
    "ColumnRuleSet",
    "ConditionGroup",
    "ConditionLogic",
    "ConditionOperator",
    "ConditionRule",
    "ConditionThen",
    "ConditionWhen",
    # Evaluation
    "OPERATOR_HANDLERS",
    "RuleEvaluator",
    "create_rule_evaluator",
    # Formatter
    "TableConditionalFormatter",
    "create_conditional_formatter",
]
