from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class PersistenceError(Exception):
    """A store-level failure, reported to the client as a generic 500."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # the rejected input is not echoed back: NaN/inf values are not valid JSON
    errors = [
        {k: v for k, v in err.items() if k not in ("input", "ctx", "url")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})
