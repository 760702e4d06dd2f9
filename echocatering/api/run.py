import uvicorn

from echocatering.api.v1.configs.config import settings


def main():
    """
    Entry point for running the ECHO Catering API server.
    """
    uvicorn.run(
        "echocatering.api.main:app",
        host=settings.fastapi.host,
        port=settings.fastapi.port,
        reload=settings.fastapi.reload,
        workers=settings.fastapi.workers,
        log_level=settings.fastapi.logging_level.lower(),
    )


if __name__ == "__main__":
    main()
