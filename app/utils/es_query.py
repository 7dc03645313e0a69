from typing import Any, Dict

from app.core.predicate import Constraint, Operator, Predicate

RANGE_KEYS = {
    Operator.LT: "lt",
    Operator.LE: "lte",
    Operator.GT: "gt",
    Operator.GE: "gte",
}


def constraint_to_filter(constraint: Constraint, keyword_suffix: str = ".keyword") -> Dict[str, Any]:
    """
    Convert one constraint into an Elasticsearch filter clause.

    Strings are matched on the keyword sub-field, numbers on the field itself.
    A term filter on an array field matches when any element is equal, so
    CONTAINS and EQ render the same way.
    """
    field = constraint.column.value
    if constraint.operator in (Operator.EQ, Operator.CONTAINS):
        if isinstance(constraint.value, str):
            field = f"{field}{keyword_suffix}"
        return {"term": {field: constraint.value}}
    return {"range": {field: {RANGE_KEYS[constraint.operator]: constraint.value}}}


def to_es_query(predicate: Predicate, keyword_suffix: str = ".keyword") -> Dict[str, Any]:
    """
    Builds the 'query' part of an Elasticsearch request body for a predicate.

    Args:
        predicate: The predicate to render.
        keyword_suffix: Suffix of the exact-match sub-field of text columns.

    Returns:
        A bool query whose filters preserve the predicate order.
    """
    return {
        "bool": {
            "filter": [constraint_to_filter(c, keyword_suffix) for c in predicate.constraints]
        }
    }
