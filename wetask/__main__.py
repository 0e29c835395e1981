"""Run the auth issuer with uvicorn using the configured host and port."""

import uvicorn

from wetask.core.config.settings import settings


def main() -> None:
    uvicorn.run(
        "wetask.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        workers=settings.API_WORKERS,
        reload=settings.RELOAD,
        log_config=None,
    )


if __name__ == "__main__":
    main()
