from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.query import AlleleQuery

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

Position = Optional[Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]]


def _blank_to_none(value):
    # Form values arrive as strings; an empty one means "not supplied".
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class BeaconAlleleRequest(BaseModel):
    referenceName: str = ""
    referenceBases: str = ""
    alternateBases: str = ""
    start: Position = None
    end: Position = None
    startMin: Position = None
    startMax: Position = None
    endMin: Position = None
    endMax: Position = None

    @field_validator("start", "end", "startMin", "startMax", "endMin", "endMax", mode="before")
    @classmethod
    def blank_positions(cls, value):
        return _blank_to_none(value)

    @field_validator("referenceName", "referenceBases", "alternateBases", mode="before")
    @classmethod
    def null_strings(cls, value):
        return "" if value is None else value

    def to_query(self) -> AlleleQuery:
        return AlleleQuery(**self.model_dump())


class LegacyQueryRequest(BaseModel):
    """Single-coordinate request: chromosome, allele and coordinate."""
    chromosome: str = ""
    allele: str = ""
    coordinate: Position = None

    @field_validator("coordinate", mode="before")
    @classmethod
    def blank_coordinate(cls, value):
        return _blank_to_none(value)

    @field_validator("chromosome", "allele", mode="before")
    @classmethod
    def null_strings(cls, value):
        return "" if value is None else value

    def to_query(self) -> AlleleQuery:
        return AlleleQuery(
            referenceName=self.chromosome,
            referenceBases=self.allele,
            coordinate=self.coordinate,
        )


class BeaconOrganization(BaseModel):
    id: str = ""
    name: str = ""


class BeaconInfo(BaseModel):
    id: str = ""
    name: str = ""
    apiVersion: str = ""
    organization: BeaconOrganization = BeaconOrganization()
    dataset: str = ""


class BeaconError(BaseModel):
    errorCode: str
    errorMessage: str


class BeaconAlleleResponse(BaseModel):
    beaconId: str
    apiVersion: str
    alleleRequest: BeaconAlleleRequest
    exists: Optional[bool] = None
    error: Optional[BeaconError] = None
