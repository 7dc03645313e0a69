from typing import Optional


class QueryValidationError(ValueError):
    """Base class for every reason an allele query can be rejected."""
    kind: str = "QueryValidation"

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field


class MissingFieldError(QueryValidationError):
    kind = "MissingField"

    def __init__(self, field: str):
        super().__init__(f"missing {field}", field=field)


class InvalidAlleleSyntaxError(QueryValidationError):
    kind = "InvalidAlleleSyntax"

    def __init__(self, field: str, value: str):
        super().__init__(f"invalid value for {field}: {value!r}", field=field)
        self.value = value


class ConflictingCoordinateModesError(QueryValidationError):
    kind = "ConflictingCoordinateModes"

    def __init__(self):
        super().__init__("please query either precise, imprecise or single coordinate position")


class IncompleteCoordinateSpecificationError(QueryValidationError):
    kind = "IncompleteCoordinateSpecification"

    def __init__(self):
        super().__init__("restrictions not met for provided coordinates")


class ServerConfigError(RuntimeError):
    """Raised when the deployment is missing a setting needed to answer queries."""
