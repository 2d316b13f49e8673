from typing import Any

UNIQUE = "unique"
FOREIGN_KEY = "foreign_key"
DEPENDENTS = "dependents"
NOT_NULL = "not_null"


class DataModelError(Exception):
    code = "data_error"
    status_code = 400

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.code

    def as_details(self) -> dict:
        return {}


class ConstraintViolation(DataModelError):
    """A write would break a uniqueness, required-reference or restrict-delete rule.

    ``field`` names the column that failed so the API layer can tell the caller
    which value to change (e.g. "email already in use").
    """

    code = "constraint_violation"
    status_code = 409

    def __init__(self, entity: str, field: str | None, kind: str, message: str | None = None):
        self.entity = entity
        self.field = field
        self.kind = kind
        super().__init__(message or f"{entity}.{field} violates {kind} constraint")

    def as_details(self) -> dict:
        return {"entity": self.entity, "field": self.field, "constraint": self.kind}


class NotFound(DataModelError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, filters: dict[str, Any] | None = None):
        self.entity = entity
        self.filters = dict(filters or {})
        super().__init__(f"{entity} not found")

    def as_details(self) -> dict:
        return {"entity": self.entity, "filters": {k: str(v) for k, v in self.filters.items()}}
