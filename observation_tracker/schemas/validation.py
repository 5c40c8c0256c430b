from pydantic import BaseModel


class ValidationError(BaseModel):
    """Individual validation error"""
    field: str  # dotted path, e.g. sections[0].questions[2].text
    message: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[ValidationError]

    def as_dicts(self) -> list[dict]:
        return [e.model_dump() for e in self.errors]
