import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.errors import (
    ConflictingCoordinateModesError,
    IncompleteCoordinateSpecificationError,
    InvalidAlleleSyntaxError,
    MissingFieldError,
)

ALLELE_PATTERN = re.compile(r'[ACGT]+|N')

IMPRECISE_FIELDS = ("startMin", "startMax", "endMin", "endMax")


class QueryMode(str, Enum):
    ALLELE = "allele"  # GA4GH allele request, JSON envelope
    LEGACY = "legacy"  # chromosome/allele/coordinate, XML response


class QueryPolicy(BaseModel):
    """Deployment-wide rules selected once from configuration."""
    model_config = ConfigDict(frozen=True)

    mode: QueryMode = QueryMode.ALLELE
    require_reference_bases: bool = True
    require_alternate_bases: bool = False
    alternate_bases_repeated: bool = True

    @property
    def require_coordinate(self) -> bool:
        return self.mode is QueryMode.LEGACY


class AlleleQuery(BaseModel):
    """
    A single inbound allele query.

    Coordinates use None for "not supplied"; zero is a valid position.
    """
    model_config = ConfigDict(frozen=True)

    referenceName: str = ""
    referenceBases: str = ""
    alternateBases: str = ""
    start: Optional[int] = None
    end: Optional[int] = None
    startMin: Optional[int] = None
    startMax: Optional[int] = None
    endMin: Optional[int] = None
    endMax: Optional[int] = None
    coordinate: Optional[int] = None

    @property
    def is_precise(self) -> bool:
        return self.start is not None and (self.end is not None or self.referenceBases != "")

    @property
    def is_imprecise(self) -> bool:
        return all(getattr(self, name) is not None for name in IMPRECISE_FIELDS)

    @property
    def is_point(self) -> bool:
        return self.coordinate is not None

    @property
    def has_coordinates(self) -> bool:
        names = ("start", "end", "coordinate") + IMPRECISE_FIELDS
        return any(getattr(self, name) is not None for name in names)

    @property
    def coordinate_groups(self) -> int:
        """How many of the precise, imprecise and point field groups are used."""
        groups = [("start", "end"), IMPRECISE_FIELDS, ("coordinate",)]
        return sum(any(getattr(self, name) is not None for name in group) for group in groups)


def is_allele(value: str) -> bool:
    """True for one or more of A/C/G/T, or exactly N."""
    return ALLELE_PATTERN.fullmatch(value) is not None


def _check_bases(field: str, value: str, required: bool) -> None:
    if not value:
        if required:
            raise MissingFieldError(field)
        return
    if not is_allele(value):
        raise InvalidAlleleSyntaxError(field, value)


def validate_coordinates(query: AlleleQuery, policy: QueryPolicy) -> None:
    modes = [query.is_precise, query.is_imprecise, query.is_point]
    # A complete mode plus any field of another mode is a mix, not a fallback.
    if sum(modes) > 1 or (any(modes) and query.coordinate_groups > 1):
        raise ConflictingCoordinateModesError()
    if any(modes):
        return
    if query.has_coordinates:
        raise IncompleteCoordinateSpecificationError()
    if policy.require_coordinate:
        raise MissingFieldError("coordinate")


def validate_query(query: AlleleQuery, policy: QueryPolicy) -> None:
    """
    Check a query before any predicate is built.

    Rules are applied in a fixed order and the first violation is raised:
    reference name, reference bases, alternate bases, then coordinates.

    Raises:
        QueryValidationError: one of its subclasses, see app.core.errors.
    """
    if not query.referenceName:
        raise MissingFieldError("referenceName")
    _check_bases("referenceBases", query.referenceBases, policy.require_reference_bases)
    _check_bases("alternateBases", query.alternateBases, policy.require_alternate_bases)
    validate_coordinates(query, policy)
