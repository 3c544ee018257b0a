from enum import Enum


class FilterOperator(str, Enum):
    """Operator names used by the dict form of a filter tree."""

    # Comparison
    EQ = "="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    IN = "in"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    # String matching
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"
    CONTAINS = "contains"

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"
