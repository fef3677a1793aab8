from enum import Enum

class GroupOperator(str, Enum):
    AND = "and"
    OR = "or"

class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    IN = "in"
    NOT_IN = "notIn"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @classmethod
    def lookup(cls, name):
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None

# Builder labels; isEmpty/isNotEmpty take no operand
OPERATOR_LABELS = {
    ConditionOperator.EQUALS: "is",
    ConditionOperator.NOT_EQUALS: "is not",
    ConditionOperator.CONTAINS: "contains",
    ConditionOperator.NOT_CONTAINS: "does not contain",
    ConditionOperator.IS_EMPTY: "is empty",
    ConditionOperator.IS_NOT_EMPTY: "is not empty",
    ConditionOperator.GREATER_THAN: "is greater than",
    ConditionOperator.LESS_THAN: "is less than",
    ConditionOperator.GREATER_THAN_OR_EQUAL: "is at least",
    ConditionOperator.LESS_THAN_OR_EQUAL: "is at most",
    ConditionOperator.IN: "is one of",
    ConditionOperator.NOT_IN: "is not one of",
    ConditionOperator.STARTS_WITH: "starts with",
    ConditionOperator.ENDS_WITH: "ends with",
}

VALUELESS_OPERATORS = frozenset({ConditionOperator.IS_EMPTY, ConditionOperator.IS_NOT_EMPTY})

def needs_value(op: ConditionOperator) -> bool:
    return op not in VALUELESS_OPERATORS
