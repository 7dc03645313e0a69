import re
from typing import List, NamedTuple, Tuple, Union

from app.core.predicate import Constraint, Operator, Predicate

# [domain:]project.dataset.table; project ids may contain dashes
TABLE_ID_PATTERN = re.compile(r'(?:[A-Za-z0-9\-.]+:)?[A-Za-z0-9_\-]+(?:\.[A-Za-z0-9_\-]+){0,2}')

SQL_OPERATORS = {
    Operator.EQ: "=",
    Operator.LT: "<",
    Operator.LE: "<=",
    Operator.GT: ">",
    Operator.GE: ">=",
}


class QueryParam(NamedTuple):
    name: str
    type: str
    value: Union[int, str]


def _param_type(value: Union[int, str]) -> str:
    return "INT64" if isinstance(value, int) else "STRING"


def _clause(constraint: Constraint, placeholder: str) -> str:
    column = f"v.{constraint.column.value}"
    if constraint.operator is Operator.CONTAINS:
        return f"{placeholder} IN UNNEST({column})"
    return f"{column} {SQL_OPERATORS[constraint.operator]} {placeholder}"


def to_sql(predicate: Predicate, table_id: str) -> Tuple[str, List[QueryParam]]:
    """
    Render a predicate as a parameterized existence query.

    Values only ever travel as named parameters (@p0, @p1, ...). The table
    identifier comes from configuration and is checked, then quoted.

    Returns:
        The SQL text and its parameters, in placeholder order.
    """
    if not TABLE_ID_PATTERN.fullmatch(table_id):
        raise ValueError(f"invalid table identifier: {table_id!r}")

    clauses = []
    params = []
    for index, constraint in enumerate(predicate.constraints):
        name = f"p{index}"
        clauses.append(_clause(constraint, f"@{name}"))
        params.append(QueryParam(name, _param_type(constraint.value), constraint.value))

    where = " AND ".join(clauses) if clauses else "TRUE"
    sql = (
        "SELECT count(v.reference_name) AS count "
        f"FROM `{table_id}` AS v "
        f"WHERE {where} "
        "LIMIT 1"
    )
    return sql, params
