from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class ObservationTrackerError(Exception):
    """Base class for domain errors raised by services and the store."""


class NotFound(ObservationTrackerError):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")

    @property
    def message(self) -> str:
        return f"{self.entity.capitalize()} not found"


class ValidationFailure(ObservationTrackerError):
    """
    Carries every problem found, as a list of {"field": ..., "message": ...}.
    """

    def __init__(self, errors: list[dict], message: str = "Validation failed"):
        self.errors = errors
        self.message = message
        super().__init__(f"{message}: {len(errors)} error(s)")


class Conflict(ObservationTrackerError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StoreFailure(ObservationTrackerError):
    """Backend failure surfaced to the caller as a readable message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def _not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


def _validation_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"message": exc.message, "errors": exc.errors}},
    )


def _conflict_handler(request: Request, exc: Conflict) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


def _store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(ValidationFailure, _validation_handler)
    app.add_exception_handler(Conflict, _conflict_handler)
    app.add_exception_handler(StoreFailure, _store_failure_handler)
