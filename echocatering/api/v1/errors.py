from contextlib import contextmanager

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from echocatering.api.v1.configs.logging_init import logger


class APIError(Exception):
    """Failure rendered as ``{"error": ..., "message": ...}`` with the given status."""

    def __init__(self, status_code: int, error: str | dict, message: str | None = None, **extra):
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        content = {"error": self.error}
        if self.message is not None:
            content["message"] = self.message
        content.update(self.extra)
        return content


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    _ = request
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@contextmanager
def api_failure(error: str, status_code: int = 500):
    """
    Convert unexpected exceptions raised inside the block into an ``APIError``.
    ``HTTPException`` and ``APIError`` pass through unchanged.
    """
    try:
        yield
    except (HTTPException, APIError):
        raise
    except Exception as e:
        logger.error(f"{error}: {e}")
        raise APIError(status_code, error, str(e)) from e
