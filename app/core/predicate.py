from enum import Enum
from typing import List, Tuple, Union

from pydantic import BaseModel, ConfigDict

from app.core.query import AlleleQuery, QueryPolicy


class Column(str, Enum):
    REFERENCE_NAME = "reference_name"
    REFERENCE_BASES = "reference_bases"
    ALTERNATE_BASES = "alternate_bases"
    START = "start"
    END = "end"


class Operator(str, Enum):
    EQ = "eq"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    CONTAINS = "contains"  # multi-valued column holds the value


class Constraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: Column
    operator: Operator
    value: Union[int, str]


class Predicate(BaseModel):
    """Ordered conjunction of column constraints."""
    model_config = ConfigDict(frozen=True)

    constraints: Tuple[Constraint, ...] = ()


def _coordinate_constraints(query: AlleleQuery) -> List[Constraint]:
    if query.is_precise:
        constraints = [Constraint(column=Column.START, operator=Operator.EQ, value=query.start)]
        if query.end is not None:
            constraints.append(Constraint(column=Column.END, operator=Operator.EQ, value=query.end))
        return constraints

    if query.is_point:
        # Start is inclusive, end is exclusive.
        return [
            Constraint(column=Column.START, operator=Operator.LE, value=query.coordinate),
            Constraint(column=Column.END, operator=Operator.GT, value=query.coordinate),
        ]

    if query.is_imprecise:
        return [
            Constraint(column=Column.START, operator=Operator.GE, value=query.startMin),
            Constraint(column=Column.START, operator=Operator.LE, value=query.startMax),
            Constraint(column=Column.END, operator=Operator.GE, value=query.endMin),
            Constraint(column=Column.END, operator=Operator.LE, value=query.endMax),
        ]

    assert not query.has_coordinates, "coordinates must be validated before building a predicate"
    return []


def build_predicate(query: AlleleQuery, policy: QueryPolicy) -> Predicate:
    """
    Translate a validated query into a predicate.

    Constraints are emitted as reference name, reference bases, alternate
    bases, coordinates. Absent optional fields produce no constraint.
    """
    assert query.referenceName, "query must be validated before building a predicate"

    constraints = [
        Constraint(column=Column.REFERENCE_NAME, operator=Operator.EQ, value=query.referenceName)
    ]
    if query.referenceBases:
        constraints.append(
            Constraint(column=Column.REFERENCE_BASES, operator=Operator.EQ, value=query.referenceBases)
        )
    if query.alternateBases:
        operator = Operator.CONTAINS if policy.alternate_bases_repeated else Operator.EQ
        constraints.append(
            Constraint(column=Column.ALTERNATE_BASES, operator=operator, value=query.alternateBases)
        )
    constraints.extend(_coordinate_constraints(query))
    return Predicate(constraints=tuple(constraints))
